"""Visualizer package - Rich terminal views of the work plan."""

from .plan_progress import render_plan_progress, render_plan_summary

__all__ = [
	"render_plan_progress",
	"render_plan_summary",
]

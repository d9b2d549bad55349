"""Guidance text shown to the agent driving the work plan."""

SERVER_INSTRUCTIONS = """
Externalizes a developer's working memory for resolving a ticket: the work plan,
its progress, and the procedure for moving tasks through review.
Do not use it for tiny tasks; the overhead is not worth it.

Features:
- Break the current ticket down into minimal groups (PRs) and units (commits)
- Track progress of the implementation work
- Update the status of work items as work progresses

Best practices:
1. Read the task-planning-guide prompt before creating a plan
2. Keep groups minimal and focused on a single logical change
3. Keep units small and atomic
4. Update status promptly as work begins or completes
5. Check progress regularly with the 'track' tool and follow its agent_instruction
"""

PLANNING_GUIDE = """
# Task Planning Guide

## Purpose
- Design a structured implementation approach before any coding begins
- Make sure requirements and dependencies are clearly understood
- Divide the ticket into small groups (PRs) and units (commits) for easier review

## Output
- A work plan organized by groups and units
- Each group should be small, functional, and independently reviewable
- Each unit should be one atomic change within its group
- Minimize dependencies between groups so they can be implemented independently

## Method
### Analysis Phase
- Analyze the architecture requirements of the task thoroughly
- Read all potentially relevant existing code and similar reference code
- Sketch the overall architecture of the solution

### Planning Approach
- Break the task down into the smallest possible groups
- Order groups logically (e.g. setup, then core logic, then tests)
- Define 2-4 atomic units for each group
- Prefer more groups over large units

### Implementation Criteria
- Only proceed once the task is completely clear
- Identify every affected part of the codebase by tracing dependencies
- **The work plan must be approved by the user before implementation**

## Prohibited Actions
- **Any implementation or code writing, including "example code"**
"""

PROGRESS_INSTRUCTION = """
Based on this progress report, analyze the current state and suggest the next unit to work on.
**Next, follow these procedures strictly**:
1. Before starting the next unit, obtain the user's approval.
2. Once approved, implement code and tests strictly within this unit's scope.
   - Make sure there are no build errors or test failures.
3. After completing the unit:
   - Review the implementation and run a self-feedback cycle.
   - Request feedback from the user.

**User Review State Procedures**:
When setting a unit status to "user_review":
1. Write a review request that includes:
   - A summary of the implementation derived from the group/unit goals and developer notes
   - The specific changes made and their intended behavior
   - Areas that particularly need the user's verification
   - How to approve (status "completed") or request changes
2. Structure the review request with clear section headings
3. Units cannot move directly to "completed"; they must pass through "user_review"
4. Only the user moves a unit from "user_review" to "completed"

**Always secure the user's agreement before starting the next unit.**
"""

STATUS_UPDATE_RULES = """
in_progress -> user_review when:
- No compilation errors exist
- Necessary tests have been added and pass
- Required documentation updates are done

needs_refinement -> in_progress when:
- Requirements are clear enough to implement
- All information needed for implementation is available
- The scope of the unit is clearly defined

user_review -> needs_refinement when:
- Review feedback makes the required changes completely clear

any -> needs_refinement when:
- The requirements turn out to be unclear or incomplete

any -> cancelled when:
- There is a clear reason the unit is no longer needed
- The impact on related units has been evaluated
"""

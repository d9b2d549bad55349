"""HTML/CSS/JS for the web dashboard - single page, no build step."""

DASHBOARD_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>micromanage - Work Plan</title>
<style>
:root {
	--bg: #0d1117;
	--bg-card: #161b22;
	--border: #30363d;
	--text: #c9d1d9;
	--text-dim: #8b949e;
	--text-bright: #f0f6fc;
	--accent: #58a6ff;
	--green: #3fb950;
	--red: #f85149;
	--yellow: #d29922;
	--purple: #bc8cff;
}
* { margin: 0; padding: 0; box-sizing: border-box; }
body {
	background: var(--bg);
	color: var(--text);
	font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Helvetica, Arial, sans-serif;
	line-height: 1.5;
}
.header {
	display: flex;
	align-items: center;
	justify-content: space-between;
	padding: 16px 24px;
	border-bottom: 1px solid var(--border);
	background: var(--bg-card);
}
.header h1 { font-size: 18px; color: var(--text-bright); font-weight: 600; }
.updated { font-size: 13px; color: var(--text-dim); }
.container { padding: 24px; max-width: 1100px; margin: 0 auto; }
.goal { font-size: 20px; color: var(--text-bright); margin-bottom: 8px; }
.bar { height: 8px; background: var(--border); border-radius: 4px; margin-bottom: 24px; }
.bar-fill { height: 8px; background: var(--green); border-radius: 4px; }
.group {
	background: var(--bg-card);
	border: 1px solid var(--border);
	border-radius: 6px;
	padding: 12px 16px;
	margin-bottom: 12px;
}
.group h2 { font-size: 15px; color: var(--text-bright); }
.note { font-size: 13px; color: var(--text-dim); margin: 2px 0 6px; }
.unit { display: flex; gap: 8px; align-items: baseline; padding: 4px 0; font-size: 14px; }
.badge { font-size: 11px; padding: 1px 6px; border-radius: 10px; border: 1px solid var(--border); white-space: nowrap; }
.s-not_started { color: var(--text-dim); }
.s-needs_refinement { color: var(--purple); }
.s-in_progress { color: var(--yellow); border-color: var(--yellow); }
.s-user_review { color: var(--accent); }
.s-completed { color: var(--green); }
.s-cancelled { color: var(--text-dim); text-decoration: line-through; }
.empty { color: var(--text-dim); text-align: center; padding: 48px; }
</style>
</head>
<body>
<div class="header">
	<h1>micromanage</h1>
	<span class="updated" id="updated"></span>
</div>
<div class="container" id="root"><div class="empty">Loading...</div></div>
<script>
function esc(s) {
	const d = document.createElement("div");
	d.textContent = s == null ? "" : String(s);
	return d.innerHTML;
}
function badge(status) {
	return `<span class="badge s-${esc(status)}">${esc(status.replace("_", " "))}</span>`;
}
async function refresh() {
	const res = await fetch("/api/progress");
	const data = await res.json();
	const root = document.getElementById("root");
	document.getElementById("updated").textContent = data.last_updated ? "updated " + data.last_updated : "";
	if (!data.has_plan) {
		root.innerHTML = '<div class="empty">No active plan.</div>';
		return;
	}
	let html = `<div class="goal">${esc(data.goal)}</div>`;
	html += `<div class="updated">${esc(data.progress.completed_units)}/${esc(data.progress.total_units)} units, ${esc(data.progress.percent_complete)}%</div>`;
	html += `<div class="bar"><div class="bar-fill" style="width:${Number(data.progress.percent_complete)}%"></div></div>`;
	for (const g of data.groups) {
		html += `<div class="group"><h2>${g.group_index}. ${esc(g.goal)} ${badge(g.status)}</h2>`;
		if (g.developer_note) html += `<div class="note">${esc(g.developer_note)}</div>`;
		for (const u of g.units) {
			html += `<div class="unit">${badge(u.status)}<span>${u.unit_index}. ${esc(u.goal)}</span></div>`;
			if (u.developer_note) html += `<div class="note">${esc(u.developer_note)}</div>`;
		}
		html += "</div>";
	}
	root.innerHTML = html;
}
refresh();
setInterval(refresh, 3000);
</script>
</body>
</html>
"""

"""Interactive Dash UI for the malware propagation simulator.

Run with:
    python -m malware_sim.visualization.dash_app

Opens at http://127.0.0.1:7860
"""

from __future__ import annotations

import logging
import os

import plotly.graph_objects as go

import dash
from dash import dcc, html, ctx, Input, Output, no_update

from malware_sim.config import SimulationConfig, default_config, load_config
from malware_sim.core.strain import (
    STRAIN_COLORS,
    STRAIN_DESCRIPTIONS,
    STRAIN_ICONS,
    Strain,
)
from malware_sim.logging_config import setup_logging
from malware_sim.simulation.engine import Simulation
from malware_sim.simulation.timeseries import to_csv

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════
#  Dark plotly theme
# ═══════════════════════════════════════════════════════════════════════

_LAYOUT_DEFAULTS = dict(
    template="plotly_dark",
    paper_bgcolor="#0f172a",
    plot_bgcolor="#0f172a",
    font=dict(family="Inter, -apple-system, sans-serif", color="#e2e8f0"),
    margin=dict(l=20, r=20, t=50, b=20),
    uirevision="stable",
)

_HEALTHY_COLOR = "#6B7280"
_EDGE_COLOR = "rgba(75,85,99,0.6)"


# ═══════════════════════════════════════════════════════════════════════
#  Configuration
# ═══════════════════════════════════════════════════════════════════════


def _load_app_config() -> SimulationConfig:
    path = os.environ.get("MALSIM_CONFIG")
    if path:
        return load_config(path)
    return default_config()


_config = _load_app_config()


# ═══════════════════════════════════════════════════════════════════════
#  Plotly rendering helpers
# ═══════════════════════════════════════════════════════════════════════


def _edge_trace(sim: Simulation) -> go.Scatter:
    edge_x: list[float | None] = []
    edge_y: list[float | None] = []
    nodes = sim.nodes
    for e in sim.edges:
        a, b = nodes[e.source], nodes[e.target]
        edge_x += [a.x, b.x, None]
        edge_y += [a.y, b.y, None]
    return go.Scatter(
        x=edge_x,
        y=edge_y,
        mode="lines",
        line=dict(width=1, color=_EDGE_COLOR),
        hoverinfo="none",
        showlegend=False,
    )


def _network_figure(sim: Simulation) -> go.Figure:
    canvas = sim.config.canvas
    fig = go.Figure()
    fig.add_trace(_edge_trace(sim))

    healthy = [n for n in sim.nodes if not n.infected]
    fig.add_trace(
        go.Scatter(
            x=[n.x for n in healthy],
            y=[n.y for n in healthy],
            mode="markers",
            marker=dict(size=16, color=_HEALTHY_COLOR,
                        line=dict(width=1, color="rgba(255,255,255,0.2)")),
            text=[f"<b>Node {n.id}</b><br>Healthy" for n in healthy],
            hoverinfo="text",
            name="Healthy",
        )
    )

    for strain in Strain:
        infected = [n for n in sim.nodes if n.infected and n.strain is strain]
        if not infected:
            continue
        fig.add_trace(
            go.Scatter(
                x=[n.x for n in infected],
                y=[n.y for n in infected],
                mode="markers",
                marker=dict(size=16, color=STRAIN_COLORS[strain],
                            line=dict(width=2, color="rgba(255,255,255,0.6)")),
                text=[f"<b>Node {n.id}</b><br>Infected: {strain.label}" for n in infected],
                hoverinfo="text",
                name=strain.label,
            )
        )

    fig.update_layout(
        title=dict(text="Network", font=dict(size=16)),
        xaxis=dict(range=[0, canvas.width], visible=False, fixedrange=True),
        yaxis=dict(range=[canvas.height, 0], visible=False, fixedrange=True,
                   scaleanchor="x"),
        height=520,
        legend=dict(orientation="h", y=-0.05),
        **_LAYOUT_DEFAULTS,
    )
    return fig


def _infection_chart(sim: Simulation) -> go.Figure:
    ts = sim.time_series
    color = STRAIN_COLORS[sim.strain]
    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=ts.steps,
            y=ts.counts,
            mode="lines+markers",
            marker=dict(size=5, color=color),
            line=dict(width=3, color=color, shape="spline"),
            name="Infected",
            hovertemplate="Step %{x}<br>Infected: %{y}<extra></extra>",
        )
    )
    fig.update_layout(
        title=dict(text="Infection Spread Over Time", font=dict(size=14)),
        xaxis=dict(title="Step", gridcolor="#374151"),
        yaxis=dict(title="Infected nodes", gridcolor="#374151",
                   range=[0, max(len(sim.nodes), 1) + 1]),
        height=300,
        **_LAYOUT_DEFAULTS,
    )
    return fig


# ═══════════════════════════════════════════════════════════════════════
#  Summary metrics
# ═══════════════════════════════════════════════════════════════════════


def _metric(label: str, value: str) -> html.Div:
    return html.Div([
        html.Div(label, className="metric-label"),
        html.Div(value, className="metric-value"),
    ], className="metric")


def _summary_metrics(sim: Simulation) -> list[html.Div]:
    total = len(sim.nodes)
    infected = sim.infected_count
    share = f"{100.0 * infected / total:.0f}%" if total else "—"
    return [
        _metric("Nodes", str(total)),
        _metric("Connections", str(len(sim.edges))),
        _metric("Infected", f"{infected} / {total}"),
        _metric("Infected share", share),
        _metric("Reachable from seed", str(sim.reachable_from_seed())),
    ]


def _status_text(sim: Simulation) -> str:
    state = "Running" if sim.is_running else "Idle"
    if sim.nodes and sim.is_saturated:
        state = "Fully infected"
    return f"Step: {sim.step_count} · Infected: {sim.infected_count} / {len(sim.nodes)} · {state}"


# ═══════════════════════════════════════════════════════════════════════
#  Server-side state (single user)
# ═══════════════════════════════════════════════════════════════════════

_simulation: Simulation | None = None


def _get_or_create_simulation() -> Simulation:
    global _simulation
    if _simulation is None:
        _simulation = Simulation(_config)
    return _simulation


# ═══════════════════════════════════════════════════════════════════════
#  Dash app + theme
# ═══════════════════════════════════════════════════════════════════════

app = dash.Dash(
    __name__,
    title="MalSim — Malware Propagation Simulator",
    suppress_callback_exceptions=True,
)

app.index_string = """<!DOCTYPE html>
<html>
<head>
    {%metas%}
    <title>{%title%}</title>
    {%favicon%}
    {%css%}
    <style>
        :root {
            --bg-base: #0b1120;
            --bg-surface: #111827;
            --bg-elevated: #1f2937;
            --border: #374151;
            --text-primary: #e2e8f0;
            --text-secondary: #9ca3af;
            --accent: #2563eb;
            --accent-light: #3b82f6;
            --green: #22c55e;
            --yellow: #eab308;
            --red: #ef4444;
            --radius: 12px;
        }
        * { box-sizing: border-box; margin: 0; padding: 0; }
        body {
            background: var(--bg-base); color: var(--text-primary);
            font-family: 'Inter', -apple-system, BlinkMacSystemFont, sans-serif;
            line-height: 1.6;
        }
        a { color: var(--accent-light); }

        /* ── Navbar ── */
        .navbar {
            position: sticky; top: 0; z-index: 50;
            display: flex; align-items: center; justify-content: space-between;
            padding: 14px 32px; background: var(--bg-surface);
            border-bottom: 1px solid var(--border);
        }
        .brand {
            font-size: 1.5em; font-weight: 700; text-decoration: none;
            background: linear-gradient(90deg, var(--accent), var(--accent-light));
            -webkit-background-clip: text; -webkit-text-fill-color: transparent;
            background-clip: text;
        }
        .nav-links a {
            margin-left: 24px; color: var(--text-secondary); text-decoration: none;
        }
        .nav-links a:hover { color: var(--accent-light); }

        /* ── Home ── */
        .hero { max-width: 1100px; margin: 0 auto; padding: 72px 32px 24px; }
        .hero h1 { font-size: 3em; line-height: 1.15; margin-bottom: 16px; }
        .hero h1 span { color: var(--accent-light); }
        .hero p { font-size: 1.2em; color: var(--text-secondary); max-width: 640px; }
        .hero-btn {
            display: inline-block; margin-top: 28px; padding: 14px 32px;
            border-radius: 10px; color: #fff; font-weight: 600; text-decoration: none;
            background: linear-gradient(90deg, var(--accent), var(--accent-light));
        }
        .section { max-width: 1100px; margin: 0 auto; padding: 32px; }
        .section h2 { font-size: 2em; margin-bottom: 24px; text-align: center; }
        .strain-grid { display: grid; grid-template-columns: repeat(3, 1fr); gap: 24px; }
        .strain-card {
            background: var(--bg-surface); border: 1px solid var(--border);
            border-radius: var(--radius); padding: 28px;
        }
        .strain-card .icon { font-size: 3em; margin-bottom: 8px; }
        .strain-card h3 { font-size: 1.5em; margin-bottom: 8px; }
        .strain-card p { color: var(--text-secondary); }

        /* ── Simulator ── */
        .sidebar {
            position: fixed; top: 62px; left: 0; bottom: 0; width: 300px;
            background: var(--bg-surface); border-right: 1px solid var(--border);
            padding: 24px 20px; overflow-y: auto;
        }
        .sidebar label {
            display: block; margin: 14px 0 6px 0;
            color: var(--text-secondary); font-size: 0.85em; font-weight: 600;
        }
        .main-area { margin-left: 300px; padding: 24px 32px; }
        .control-bar { display: flex; gap: 10px; margin-bottom: 12px; flex-wrap: wrap; }
        .control-bar button {
            padding: 10px 20px; min-width: 110px; border-radius: 10px;
            border: 1px solid var(--border); background: var(--bg-elevated);
            color: #fff; font-weight: 600; cursor: pointer;
        }
        .control-bar button.start { background: var(--green); border-color: var(--green); }
        .control-bar button.pause { background: var(--yellow); border-color: var(--yellow); }
        .control-bar button.danger { background: var(--red); border-color: var(--red); }
        .control-bar button.primary { background: var(--accent); border-color: var(--accent); }
        .status-badge {
            display: inline-block; padding: 6px 16px; margin: 6px 0 12px;
            border-radius: 999px; background: var(--bg-elevated);
            border: 1px solid var(--border); color: var(--accent-light);
            font-size: 0.9em; font-weight: 600;
        }
        .metrics-bar { display: flex; gap: 28px; margin: 12px 0; flex-wrap: wrap; }
        .metric-label { color: var(--text-secondary); font-size: 0.8em; }
        .metric-value { font-size: 1.3em; font-weight: 700; }

        .footer {
            margin-top: 48px; padding: 32px; text-align: center;
            border-top: 1px solid var(--border); color: var(--text-secondary);
            font-size: 0.9em;
        }
        .about-page { max-width: 800px; margin: 0 auto; padding: 48px 32px; }
        .about-page h1 { margin-bottom: 16px; }
        .about-page p, .about-page li { margin-bottom: 10px; color: var(--text-secondary); }
        .about-page ul { margin-left: 20px; }
    </style>
</head>
<body>
    {%app_entry%}
    <footer>
        {%config%}
        {%scripts%}
        {%renderer%}
    </footer>
</body>
</html>"""


# ═══════════════════════════════════════════════════════════════════════
#  Page layouts
# ═══════════════════════════════════════════════════════════════════════


def _navbar():
    return html.Nav([
        html.A("🛡 MalSim", href="/", className="brand"),
        html.Div([
            html.A("Home", href="/"),
            html.A("Simulation", href="/simulator"),
            html.A("Learn", href="/#learn"),
            html.A("About", href="/about"),
        ], className="nav-links"),
    ], className="navbar")


def _footer():
    return html.Div([
        html.P("⚠️ Educational purposes only — no real malware is executed."),
    ], className="footer")


def _strain_cards():
    cards = []
    for strain in Strain:
        cards.append(html.Div([
            html.Div(STRAIN_ICONS[strain], className="icon"),
            html.H3(strain.label, style={"color": STRAIN_COLORS[strain]}),
            html.P(STRAIN_DESCRIPTIONS[strain]),
        ], className="strain-card"))
    return html.Div(cards, className="strain-grid")


def _welcome_layout():
    return html.Div([
        _navbar(),
        html.Div([
            html.H1(["Explore Malware Behavior ", html.Span("Safely")]),
            html.P(
                "Simulate Viruses, Worms, and Trojans in a controlled environment. "
                "Learn how malware spreads through networks."
            ),
            html.A("Start Simulation", href="/simulator", className="hero-btn"),
        ], className="hero"),
        html.Div([
            html.H2("Learn About Malware"),
            _strain_cards(),
        ], id="learn", className="section"),
        _footer(),
    ])


def _about_layout():
    mult = _config.infection.strain_multipliers()
    return html.Div([
        _navbar(),
        html.Div([
            html.H1("About"),
            html.P(
                "MalSim models infection spread over a random contact graph as a "
                "discrete-time stochastic process. One node starts infected; on "
                "every step each infected node tries to infect each healthy "
                "neighbor with probability p × strain multiplier."
            ),
            html.Ul([
                html.Li(f"{s.label}: × {mult[s]:g}") for s in Strain
            ]),
            html.P(
                "Nodes drift slowly and bounce off the canvas edges. Infections "
                "are permanent, so the run ends once every node is infected."
            ),
            html.P("No real malicious code is executed."),
        ], className="about-page"),
        _footer(),
    ])


def _simulator_layout():
    net = _config.network
    inf = _config.infection
    sim = _get_or_create_simulation()
    size_marks = {s: str(s) for s in range(net.size_min, net.size_max + 1, net.size_step)}
    prob_marks = {round(inf.probability_min, 1): f"{inf.probability_min:g}",
                  round(inf.probability_max, 1): f"{inf.probability_max:g}"}

    return html.Div([
        _navbar(),
        # ── Sidebar ──────────────────────────────────────────────────
        html.Div([
            html.Label("Malware Type"),
            dcc.Dropdown(
                id="strain-selector",
                options=[{"label": f"{STRAIN_ICONS[s]} {s.label}", "value": s.value}
                         for s in Strain],
                value=sim.strain.value,
                clearable=False,
                style={"color": "#111827"},
            ),
            html.Label(id="prob-label", children=f"Infection Probability: {sim.probability:.2f}"),
            dcc.Slider(id="prob-slider", min=inf.probability_min, max=inf.probability_max,
                       step=inf.probability_step, value=sim.probability, marks=prob_marks),
            html.Label(id="size-label", children=f"Network Size: {sim.network_size}"),
            dcc.Slider(id="size-slider", min=net.size_min, max=net.size_max,
                       step=net.size_step, value=sim.network_size, marks=size_marks),
        ], className="sidebar"),

        # ── Main area ────────────────────────────────────────────────
        html.Div([
            html.Div([
                html.Button("▶ Start", id="btn-start-pause", className="start", n_clicks=0),
                html.Button("↺ Reset", id="btn-reset", className="danger", n_clicks=0),
                html.Button("⬇ Download CSV", id="btn-download", className="primary", n_clicks=0),
            ], className="control-bar"),

            html.Div(id="status-display", children=_status_text(sim), className="status-badge"),

            dcc.Graph(id="network-graph", config={"displayModeBar": False}),
            html.Div(id="metrics", className="metrics-bar"),
            dcc.Graph(id="infection-chart", config={"displayModeBar": False}),

            # Hidden components
            dcc.Interval(id="tick-interval",
                         interval=_config.simulation.tick_interval_ms, disabled=True),
            dcc.Download(id="csv-download"),
        ], className="main-area"),
    ])


# ═══════════════════════════════════════════════════════════════════════
#  App layout (URL routing)
# ═══════════════════════════════════════════════════════════════════════

app.layout = html.Div([
    dcc.Location(id="url", refresh=False),
    html.Div(id="page-content"),
])


# ═══════════════════════════════════════════════════════════════════════
#  Callbacks
# ═══════════════════════════════════════════════════════════════════════

# ── CB0: URL routing ─────────────────────────────────────────────────

@app.callback(
    Output("page-content", "children"),
    Input("url", "pathname"),
)
def display_page(pathname):
    if pathname and pathname.startswith("/simulator"):
        return _simulator_layout()
    elif pathname == "/about":
        return _about_layout()
    return _welcome_layout()


# ── CB1: Controls + timer -> advance / reset simulation ─────────────

@app.callback(
    Output("network-graph", "figure"),
    Output("infection-chart", "figure"),
    Output("status-display", "children"),
    Output("metrics", "children"),
    Output("tick-interval", "disabled"),
    Output("btn-start-pause", "children"),
    Output("btn-start-pause", "className"),
    Output("strain-selector", "disabled"),
    Output("prob-slider", "disabled"),
    Output("size-slider", "disabled"),
    Output("prob-label", "children"),
    Output("size-label", "children"),
    Input("btn-start-pause", "n_clicks"),
    Input("btn-reset", "n_clicks"),
    Input("tick-interval", "n_intervals"),
    Input("size-slider", "value"),
    Input("strain-selector", "value"),
    Input("prob-slider", "value"),
)
def simulation_update(start_clicks, reset_clicks, n_intervals, size, strain, probability):
    sim = _get_or_create_simulation()
    triggered = ctx.triggered_id

    # Dash serves callbacks from a thread pool; a stale tick must not
    # land on top of a reset.
    with sim.lock:
        if triggered == "btn-start-pause":
            if sim.is_running:
                sim.pause()
            else:
                sim.start()
        elif triggered == "btn-reset":
            sim.reset()
        elif triggered == "tick-interval":
            if sim.is_running:
                sim.tick()
        elif triggered == "size-slider":
            if size is not None and size != sim.network_size:
                sim.reset(network_size=int(size))
        elif triggered == "strain-selector":
            if strain:
                sim.set_strain(strain)
        elif triggered == "prob-slider":
            if probability is not None:
                sim.set_probability(float(probability))

        running = sim.is_running
        return (
            _network_figure(sim),
            _infection_chart(sim),
            _status_text(sim),
            _summary_metrics(sim),
            not running,
            "⏸ Pause" if running else "▶ Start",
            "pause" if running else "start",
            running, running, running,
            f"Infection Probability: {sim.probability:.2f}",
            f"Network Size: {sim.network_size}",
        )


# ── CB2: CSV export ──────────────────────────────────────────────────

@app.callback(
    Output("csv-download", "data"),
    Input("btn-download", "n_clicks"),
    prevent_initial_call=True,
)
def download_csv(n_clicks):
    if not n_clicks:
        return no_update
    sim = _get_or_create_simulation()
    with sim.lock:
        samples = sim.time_series.snapshot()
    logger.info("Exporting %d samples to CSV", len(samples))
    return dcc.send_string(to_csv(samples), _config.output.csv_filename)


# ═══════════════════════════════════════════════════════════════════════
#  Entry point
# ═══════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    setup_logging()
    port = int(os.environ.get("PORT", 7860))
    app.run(host="0.0.0.0", debug=False, port=port)

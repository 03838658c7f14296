# =============================================================================
# greenmaster_core/ui/relationship_chart.py
# Plotly rendering of the relationship map
# =============================================================================

from __future__ import annotations

from typing import Sequence

import plotly.graph_objects as go

from greenmaster_core.relationships import ConnectionStatus, Hub, affinity_color
from greenmaster_core.ui.theme import GRID_COLOR, PRIMARY_COLOR, SUBTLE_TEXT


def relationship_figure(hubs: Sequence[Hub], height: int = 700) -> go.Figure:
    """Hubs as large markers, people around them, dashed edges for past positions."""
    fig = go.Figure()

    for hub in hubs:
        for node in hub.people:
            past = node.connection.status == ConnectionStatus.PAST
            fig.add_trace(go.Scatter(
                x=[hub.x, node.x], y=[hub.y, node.y],
                mode="lines",
                line=dict(color=GRID_COLOR if past else affinity_color(node.connection.affinity),
                          width=1 if past else 2, dash="dot" if past else "solid"),
                hoverinfo="skip",
                showlegend=False,
            ))

    people = [node for hub in hubs for node in hub.people]
    if people:
        fig.add_trace(go.Scatter(
            x=[n.x for n in people],
            y=[n.y for n in people],
            mode="markers+text",
            text=[n.connection.person_name for n in people],
            textposition="bottom center",
            marker=dict(
                size=18,
                color=[affinity_color(n.connection.affinity) for n in people],
                opacity=[0.45 if n.connection.status == ConnectionStatus.PAST else 1.0 for n in people],
                line=dict(width=1, color="white"),
            ),
            hovertext=[
                f"{n.connection.person_name}<br>{n.connection.person_role}"
                f"<br>{'현직' if n.connection.status == ConnectionStatus.CURRENT else '전직'}"
                f" · {n.connection.tenure}"
                for n in people
            ],
            hoverinfo="text",
            name="인물",
        ))

    if hubs:
        fig.add_trace(go.Scatter(
            x=[h.x for h in hubs],
            y=[h.y for h in hubs],
            mode="markers+text",
            text=[h.course.name for h in hubs],
            textposition="top center",
            marker=dict(size=42, color=PRIMARY_COLOR, line=dict(width=3, color="white")),
            hovertext=[f"{h.course.name}<br>현직: {h.current_count}명<br>전직: {h.past_count}명" for h in hubs],
            hoverinfo="text",
            name="골프장",
        ))

    fig.update_layout(
        height=height,
        showlegend=False,
        plot_bgcolor="white",
        margin=dict(l=10, r=10, t=10, b=10),
        font=dict(color=SUBTLE_TEXT),
    )
    fig.update_xaxes(visible=False)
    # screen coordinates: y grows downward
    fig.update_yaxes(visible=False, autorange="reversed", scaleanchor="x")
    return fig

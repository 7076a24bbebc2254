"""
dashboard.py — Streamlit live monitor for the rival-faction simulation.

Launch:
    streamlit run dashboard.py

Reads only dashboard_data.json — no simulation modules imported.
Press Refresh (or rerun) to pick up the latest snapshot.
"""

import json
import pathlib

import numpy as np
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

DATA_PATH = pathlib.Path("dashboard_data.json")

# Relation ranks as written by the bridge: -1 = self, 0 = WAR … 4 = ALLIED
_STATUS_COLORS = ['#b71c1c', '#ef6c00', '#9e9e9e', '#7cb342', '#1e88e5']
_SELF_COLOR    = '#1a1f2b'

_FACTION_COLORS = [
    '#FF4B4B', '#FFB347', '#66FF99', '#66ECFF',
    '#CC66FF', '#FAFF66', '#FF66C0', '#AAAAAA',
]

_PERSONALITY_ICON = {
    'AGGRESSIVE':   '⚔',
    'DIPLOMATIC':   '🕊',
    'ISOLATIONIST': '🏯',
    'TRADER':       '💰',
}


# ══════════════════════════════════════════════════════════════════════════
# Data loading: TTL-cached so we don't hammer disk on every Streamlit run
# ══════════════════════════════════════════════════════════════════════════

@st.cache_data(ttl=2)
def _read_json(mtime: float) -> dict | None:          # mtime is the cache-bust key
    try:
        return json.loads(DATA_PATH.read_text(encoding='utf-8'))
    except (FileNotFoundError, json.JSONDecodeError):
        return None


def load_data() -> dict | None:
    try:
        mtime = DATA_PATH.stat().st_mtime
    except FileNotFoundError:
        return None
    return _read_json(mtime)


# ══════════════════════════════════════════════════════════════════════════
# Relation heatmap
# ══════════════════════════════════════════════════════════════════════════

def _discrete_scale() -> list:
    """Stepped Plotly colourscale over ranks -1 … 4."""
    colors = [_SELF_COLOR] + _STATUS_COLORS
    n      = len(colors)
    scale  = []
    for i, c in enumerate(colors):
        scale.append([i / n, c])
        scale.append([(i + 1) / n, c])
    return scale


def build_relation_heatmap(data: dict) -> go.Figure:
    ids      = data.get('faction_ids', [])
    statuses = data.get('statuses', [])
    matrix   = np.array(data.get('relations', []), dtype=float).reshape(len(ids), len(ids))
    labels   = [['—' if v < 0 else statuses[int(v)] for v in row] for row in matrix]

    fig = go.Figure(go.Heatmap(
        z=matrix, x=ids, y=ids,
        zmin=-1.5, zmax=4.5,
        colorscale=_discrete_scale(),
        showscale=False,
        text=labels,
        texttemplate='%{text}',
        hovertemplate='%{y} → %{x}: %{text}<extra></extra>',
    ))
    fig.update_layout(
        title=dict(text='Relations', font=dict(color='#dddddd', size=13), x=0.0),
        paper_bgcolor='#0e1117',
        plot_bgcolor='#0e1117',
        font=dict(color='white'),
        yaxis=dict(autorange='reversed'),
        margin=dict(l=40, r=10, t=40, b=30),
        height=340,
    )
    return fig


# ══════════════════════════════════════════════════════════════════════════
# Territory map
# ══════════════════════════════════════════════════════════════════════════

def build_territory_map(data: dict) -> go.Figure:
    """Owner-index image of every claimed tile (0 = unclaimed)."""
    factions = data.get('factions', [])
    tiles    = [tuple(map(int, key.split(','))) for f in factions for key in f['territory']]
    rows     = max((r for r, _ in tiles), default=0) + 3
    cols     = max((c for _, c in tiles), default=0) + 3
    owner    = np.zeros((rows, cols), dtype=int)
    for idx, f in enumerate(factions, start=1):
        for key in f['territory']:
            r, c = map(int, key.split(','))
            if r >= 0 and c >= 0:
                owner[r, c] = idx

    palette = ['#111827'] + [_FACTION_COLORS[i % len(_FACTION_COLORS)]
                             for i in range(len(factions))]
    fig = px.imshow(owner, origin='upper', aspect='equal',
                    color_continuous_scale=[[i / max(1, len(palette) - 1), c]
                                            for i, c in enumerate(palette)])
    fig.update_layout(
        coloraxis_showscale=False,
        paper_bgcolor='#0e1117',
        plot_bgcolor='#0e1117',
        margin=dict(l=0, r=0, t=0, b=0),
        xaxis=dict(showticklabels=False, showgrid=False, zeroline=False),
        yaxis=dict(showticklabels=False, showgrid=False, zeroline=False),
        height=300,
    )
    return fig


# ══════════════════════════════════════════════════════════════════════════
# Strength time-series
# ══════════════════════════════════════════════════════════════════════════

def build_strength_chart(data: dict, metric: str) -> go.Figure:
    history = data.get('history', [])
    fig = go.Figure()
    for idx, fid in enumerate(data.get('faction_ids', [])):
        ticks_ = [h['tick']         for h in history if fid in h.get(metric, {})]
        vals_  = [h[metric][fid]    for h in history if fid in h.get(metric, {})]
        if not ticks_:
            continue
        fig.add_trace(go.Scatter(
            x=ticks_, y=vals_,
            mode='lines',
            line=dict(color=_FACTION_COLORS[idx % len(_FACTION_COLORS)], width=2),
            name=fid,
        ))
    fig.update_layout(
        title=dict(text=f'{metric.title()} over time',
                   font=dict(color='#dddddd', size=13), x=0.0),
        paper_bgcolor='#0e1117',
        plot_bgcolor='#111827',
        font=dict(color='white'),
        xaxis=dict(title='Tick', gridcolor='#1e2233', zeroline=False),
        yaxis=dict(gridcolor='#1e2233'),
        legend=dict(bgcolor='rgba(0,0,0,0)', font=dict(color='white', size=11)),
        margin=dict(l=50, r=20, t=40, b=40),
        height=300,
    )
    return fig


# ══════════════════════════════════════════════════════════════════════════
# Page config: must be first Streamlit call
# ══════════════════════════════════════════════════════════════════════════

st.set_page_config(
    page_title='Rival Factions — Live Monitor',
    page_icon='⚖',
    layout='wide',
    initial_sidebar_state='expanded',
)

st.markdown("""
<style>
[data-testid="stTextArea"] textarea {
    font-family: 'Courier New', monospace;
    font-size: 11px;
    background: #0a0e17;
    color: #a8c8a8;
    border: 1px solid #2a3040;
}
</style>
""", unsafe_allow_html=True)

data = load_data()

# ══════════════════════════════════════════════════════════════════════════
# Sidebar
# ══════════════════════════════════════════════════════════════════════════

with st.sidebar:
    st.title('⚖ Rival Factions')
    st.caption('Diplomacy simulation · Live Monitor')

    if st.button('⟳  Refresh', use_container_width=True):
        st.cache_data.clear()
        st.rerun()

    st.divider()

    if data is None:
        st.warning(
            '**Waiting for simulation data…**\n\n'
            'Run the simulation first:\n\n```\npython -m rival_factions\n```'
        )
    else:
        st.metric('⏱  Tick',          f'{data["tick"]:,}')
        st.metric('⚡ Tick Rate',      f'{data["tick_rate"]:.2f} t/s')
        st.metric('📜 Active Treaties', str(data.get('active_events', 0)))

        st.divider()
        st.subheader('Factions')
        for idx, f in enumerate(data.get('factions', [])):
            color = _FACTION_COLORS[idx % len(_FACTION_COLORS)]
            icon  = _PERSONALITY_ICON.get(f['personality'], '●')
            research = f['research'] or 'idle'
            st.markdown(
                f'<span style="color:{color}">●</span> **{f["name"]}** {icon}  \n'
                f'&nbsp;&nbsp;&nbsp;{f["state"].title()} · {f["epoch"].title()} · '
                f'pop {f["population"]}  \n'
                f'&nbsp;&nbsp;&nbsp;research: {research} ({f["progress"]:.0f}%)',
                unsafe_allow_html=True,
            )

# ══════════════════════════════════════════════════════════════════════════
# Main panel
# ══════════════════════════════════════════════════════════════════════════

if data is None:
    st.info('**dashboard_data.json** not found yet.  \n'
            'Start the simulation and the first snapshot appears shortly.')
    st.stop()

st.markdown(f'### Tick **{data["tick"]:,}** &nbsp;·&nbsp; '
            f'{len(data.get("factions", []))} factions &nbsp;·&nbsp; '
            f'{data.get("active_events", 0)} treaties in force')

col_left, col_right = st.columns([1, 1], gap='medium')

with col_left:
    st.plotly_chart(build_relation_heatmap(data), use_container_width=True,
                    key='relations', config={'displayModeBar': False})
    st.subheader('Territory')
    st.plotly_chart(build_territory_map(data), use_container_width=True,
                    key='territory', config={'displayModeBar': False})

with col_right:
    metric = st.radio('Series', ['military', 'economic', 'population'],
                      horizontal=True, label_visibility='collapsed')
    st.plotly_chart(build_strength_chart(data, metric), use_container_width=True,
                    key='strengths', config={'displayModeBar': False})

    st.subheader('Event Feed')
    events = list(reversed(data.get('event_tail', [])))
    st.text_area(label='Events', value='\n'.join(events[:30]), height=240,
                 disabled=True, key='event_feed', label_visibility='collapsed')

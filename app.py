from __future__ import annotations

"""Map explorer for a spatial lookup dataset.

Run with:  streamlit run app.py

Settings come from SPATIAL_LOOKUP_* environment variables or st.secrets
(SPATIAL_LOOKUP_FILE and SPATIAL_LOOKUP_PROPERTY are required).
"""

import json
import os
from typing import Any

import folium
import streamlit as st
from streamlit_folium import st_folium

from spatial_lookup.config import ENV_PREFIX, LookupConfig, load_config
from spatial_lookup.errors import ConfigError
from spatial_lookup.geojson import build_from_file
from spatial_lookup.projection import point_transform


APP_TITLE = "Spatial Lookup"
MAP_CRS = "EPSG:4326"  # folium clicks are lon/lat


def _read_secret(key: str) -> str | None:
    # priority: env vars, then st.secrets
    val = os.getenv(ENV_PREFIX + key)
    if val:
        return val
    try:
        if ENV_PREFIX + key in st.secrets:
            return str(st.secrets[ENV_PREFIX + key])
    except Exception:
        # st.secrets may not be configured in local runs
        pass
    return None


def _config() -> LookupConfig:
    for key in ("FILE", "PROPERTY", "DATA_CRS"):
        val = _read_secret(key)
        if val and not os.getenv(ENV_PREFIX + key):
            os.environ[ENV_PREFIX + key] = val
    return load_config()


@st.cache_resource(show_spinner="Indexing polygons...")
def _service(geojson_path: str, attribute: str, node_capacity: int):
    # one build per process; every session shares the read-only service
    return build_from_file(geojson_path, attribute, node_capacity=node_capacity)


@st.cache_resource(show_spinner=False)
def _geojson(geojson_path: str) -> dict[str, Any]:
    with open(geojson_path, "r", encoding="utf-8-sig") as f:
        return json.load(f)


def _render_map(gj, attribute: str, center, click_lat=None, click_lon=None):
    m = folium.Map(location=center, zoom_start=6, tiles="OpenStreetMap", control_scale=True)

    folium.GeoJson(
        gj,
        name="Polygons",
        style_function=lambda _: {"fillOpacity": 0.08, "weight": 1},
        tooltip=folium.GeoJsonTooltip(fields=[attribute], aliases=[attribute]),
    ).add_to(m)

    if click_lat is not None and click_lon is not None:
        folium.Marker(location=[click_lat, click_lon], tooltip="Selected point").add_to(m)

    folium.LayerControl(collapsed=True).add_to(m)
    return m


st.set_page_config(layout="wide", page_title=APP_TITLE)
st.title(APP_TITLE)

try:
    cfg = _config()
except ConfigError as e:
    st.error(str(e))
    st.stop()

outcome = _service(cfg.geojson_path, cfg.attribute, cfg.node_capacity)
if not outcome.ok:
    st.error(f"Could not build an index from {cfg.geojson_path}.")
    st.json([{"kind": f.kind.value, "message": f.message} for f in outcome.failures])
    st.stop()

service = outcome.service
to_data_crs = point_transform(MAP_CRS, cfg.data_crs)

st.caption(
    f"{len(service)} polygons indexed from `{cfg.geojson_path}`"
    f" ({outcome.skipped} non-polygonal features skipped). Returning `{service.attribute_name}`."
)

min_x, min_y, max_x, max_y = service.bounds
cx, cy = (min_x + max_x) / 2.0, (min_y + max_y) / 2.0
to_map_crs = point_transform(cfg.data_crs, MAP_CRS)
if to_map_crs is not None:
    cx, cy = to_map_crs(cx, cy)
center = [cy, cx]

last_click = st.session_state.get("last_click")
click_lat = last_click.get("lat") if last_click else None
click_lon = last_click.get("lon") if last_click else None

st.subheader("1) Click a point on the map")
m = _render_map(_geojson(cfg.geojson_path), service.attribute_name, center, click_lat, click_lon)
out = st_folium(m, width=None, height=480)

if out and out.get("last_clicked"):
    click_lat = float(out["last_clicked"]["lat"])
    click_lon = float(out["last_clicked"]["lng"])
    st.session_state.last_click = {"lat": click_lat, "lon": click_lon}

st.divider()
st.subheader("2) Or enter coordinates")
col1, col2 = st.columns(2)
with col1:
    x = st.number_input("x / longitude", value=click_lon if click_lon is not None else center[1], format="%.6f")
with col2:
    y = st.number_input("y / latitude", value=click_lat if click_lat is not None else center[0], format="%.6f")

qx, qy = (to_data_crs(x, y) if to_data_crs is not None else (x, y))
hits = service.lookup(qx, qy)

st.subheader("3) Result")
if hits:
    st.success(f"{len(hits)} polygon(s) contain ({x:.6f}, {y:.6f})")
else:
    st.info(f"No polygon contains ({x:.6f}, {y:.6f}).")
st.json(hits, expanded=True)

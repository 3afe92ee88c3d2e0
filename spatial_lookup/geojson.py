from __future__ import annotations

"""GeoJSON input: read a file into RawFeatures and build a service from it.

Accepts a FeatureCollection, a bare list of features or a single Feature.
Feature order is preserved; it decides the discovery order of overlapping
matches.
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Union

from .errors import InputError
from .index import DEFAULT_NODE_CAPACITY
from .records import RawFeature
from .service import BuildFailure, BuildOutcome, FailureKind, build, failed_build

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def parse_features(data: Any) -> List[RawFeature]:
    """Extract RawFeatures from already-decoded GeoJSON."""
    if isinstance(data, dict):
        kind = data.get("type")
        if kind == "FeatureCollection":
            feats = data.get("features")
            if not isinstance(feats, list):
                raise InputError("FeatureCollection has no 'features' list")
            return [RawFeature.from_geojson(f) for f in feats]
        if kind == "Feature":
            return [RawFeature.from_geojson(data)]
        raise InputError(f"unsupported GeoJSON object type: {kind!r}")
    if isinstance(data, list):
        return [RawFeature.from_geojson(f) for f in data]
    raise InputError(f"expected a GeoJSON object or list, got {type(data).__name__}")


def read_features(path: PathLike) -> List[RawFeature]:
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise InputError(f"cannot read {path}: {e}") from e
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InputError(f"{path} is not valid JSON: {e}") from e

    features = parse_features(data)
    logger.debug("read %d features from %s", len(features), path)
    return features


def build_from_file(
    path: PathLike,
    attribute_name: str,
    node_capacity: int = DEFAULT_NODE_CAPACITY,
) -> BuildOutcome:
    """read_features + build, with input problems reported in the outcome."""
    try:
        features = read_features(path)
    except InputError as e:
        return failed_build(attribute_name, [BuildFailure(FailureKind.INPUT, str(e))])
    return build(features, attribute_name, node_capacity=node_capacity)

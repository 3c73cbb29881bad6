"""Source registry."""

from ingest_articles.fetch_articles.sources import (
    faz,
    handelsblatt,
    sueddeutsche,
    tagesschau,
    taz,
    welt,
    zeit,
)

# Registry mapping source keys to their adapter modules
SOURCES = {
    "zeit": zeit,
    "faz": faz,
    "tagesschau": tagesschau,
    "sueddeutsche": sueddeutsche,
    "welt": welt,
    "handelsblatt": handelsblatt,
    "taz": taz,
}


def get_source_module(source_id: str):
    """Get the adapter module for a given source key."""
    if source_id not in SOURCES:
        raise ValueError(f"Unknown source: {source_id}. Valid sources: {list(SOURCES.keys())}")
    return SOURCES[source_id]

"""
Stage Classifier
================
Maps a 0-100 completion rate to a named growth stage.
"""

# (inclusive lower bound, stage), ascending
GROWTH_STAGES = (
    (0, "seed"),
    (10, "germinating"),
    (25, "seedling"),
    (45, "growing"),
    (60, "sprout"),
    (70, "budding"),
    (80, "flowering"),
    (90, "blooming"),
    (95, "fruiting"),
)

# Older four-bucket table, kept for deployments that still display it
LEGACY_STAGES = (
    (0, "seed"),
    (60, "seedling"),
    (70, "sprout"),
    (90, "blooming"),
)

STAGE_TABLES = {
    "growth": GROWTH_STAGES,
    "legacy": LEGACY_STAGES,
}


def get_stage_table(name):
    """Look up a stage table by its config name."""
    try:
        return STAGE_TABLES[name]
    except KeyError:
        raise ValueError(f"Unknown stage table '{name}'. Expected one of: {', '.join(STAGE_TABLES)}")


def stage_names(table=GROWTH_STAGES):
    return [name for _, name in table]


def classify_stage(rate, table=GROWTH_STAGES):
    rate = min(max(rate or 0, 0), 100)
    stage = table[0][1]
    for lower, name in table:
        if rate >= lower:
            stage = name
    return stage


def empty_distribution(table=GROWTH_STAGES):
    """Zero count for every stage, in table order."""
    return {name: 0 for name in stage_names(table)}

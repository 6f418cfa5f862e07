"""
Parent Garden View
==================
What a parent sees: the anonymized summaries of their children's classes
plus full metrics for their own children only.
"""
import logging

from classgarden.config import STUDENTS_TABLE, config as default_config
from classgarden.models import GardenView, Student, StudentMetrics, parse_records
from classgarden.services.aggregator import aggregate_student
from classgarden.services.class_data import load_class_data
from classgarden.services.class_summary import get_or_create_summary
from classgarden.services.fetcher import FetchError
from classgarden.services.stages import get_stage_table
from classgarden.store import StoreError

logger = logging.getLogger(__name__)


def load_children(store, parent_id):
    try:
        rows = store.select(STUDENTS_TABLE, {"parentId": parent_id, "isActive": True})
    except StoreError as e:
        raise FetchError(str(e)) from e
    return parse_records(Student, rows)


def _placeholder_metrics(child):
    return StudentMetrics(id=child.id, name=child.name, stage="seed", is_own_child=True)


def garden_for_parent(parent_id, store, config=None):
    """Build the GardenView for ``parent_id``.

    A class whose summary cannot be loaded is left out; a child whose data
    cannot be loaded is shown with zeroed metrics.
    """
    config = config or default_config
    table = get_stage_table(config.stage_table)

    children = load_children(store, parent_id)
    if not children:
        return GardenView()

    class_ids = []
    for child in children:
        if child.class_id and child.class_id not in class_ids:
            class_ids.append(child.class_id)

    summaries = []
    for class_id in class_ids:
        try:
            summaries.append(get_or_create_summary(class_id, store, config))
        except (FetchError, StoreError) as e:
            logger.warning("Could not load summary for class %s: %s", class_id, e)

    class_cache = {}
    own = []
    for child in children:
        if not child.class_id:
            own.append(_placeholder_metrics(child))
            continue
        if child.class_id not in class_cache:
            try:
                class_cache[child.class_id] = load_class_data(child.class_id, store, config)
            except FetchError as e:
                logger.error("Error getting data for class %s: %s", child.class_id, e)
                class_cache[child.class_id] = None
        data = class_cache[child.class_id]
        if data is None:
            own.append(_placeholder_metrics(child))
            continue
        metrics = aggregate_student(child, data.assignments, data.submissions, table)
        metrics.is_own_child = True
        own.append(metrics)

    return GardenView(class_summaries=summaries, own_children_data=own)

"""Heuristics shipped with the service.

Each predicate answers False when the metadata it inspects is missing:
absence of evidence is not a processing failure.
"""

from picserver.heuristics.registry import registry
from picserver.metadata.models import ImageMetadata

PHOTOSHOP_SIGNATURE = "Adobe Photoshop "


@registry.register("creator_tool_is_photoshop")
def creator_tool_is_photoshop(meta: ImageMetadata) -> bool:
    tool = meta.creator_tool
    return tool is not None and tool.startswith(PHOTOSHOP_SIGNATURE)


@registry.register("create_modify_mismatch")
def create_modify_mismatch(meta: ImageMetadata) -> bool:
    """True when xmp:CreateDate and xmp:ModifyDate disagree.

    Timezone offset and sub-second fields are ignored for now.
    """
    created = meta.create_date
    if created is None:
        return False
    modified = meta.modify_date
    if modified is None:
        return False
    return created.to_second() != modified.to_second()


@registry.register("history_agent_is_photoshop")
def history_agent_is_photoshop(meta: ImageMetadata) -> bool:
    return any(
        event.software_agent is not None
        and event.software_agent.startswith(PHOTOSHOP_SIGNATURE)
        for event in meta.history
    )


@registry.register("history_has_multiple_events")
def history_has_multiple_events(meta: ImageMetadata) -> bool:
    # more than one xmpMM:History entry means several processing stages
    return len(meta.history) > 1

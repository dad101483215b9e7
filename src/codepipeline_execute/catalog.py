"""Flatten a pipeline definition into the ordered set of actions to observe."""

from __future__ import annotations

from codepipeline_execute.models import ActionObservation, ObservedSet, PipelineDefinition


def build_catalog(definition: PipelineDefinition) -> ObservedSet:
    """Return one NotStarted observation per action, in stage then action order."""

    catalog: list[ActionObservation] = []
    for stage in definition.stages:
        if not stage.name:
            raise ValueError(f"Pipeline {definition.name!r} has a stage without a name")
        for action_name in stage.actions:
            if not action_name:
                raise ValueError(f"Stage {stage.name!r} has an action without a name")
            catalog.append(ActionObservation(stage_name=stage.name, action_name=action_name))
    return tuple(catalog)

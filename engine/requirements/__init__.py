"""Requirements Module - Canonical job requirement model and edit operations."""
from engine.requirements.models import (
    Priority, GroupType, Category, Requirement, RequirementGroup,
    RequirementBucket, GroupedRequirementBucket, ExperienceRequirements,
    JobRequirementModel, RequirementLocation,
    DEFAULT_SCORES, EXPERIENCE_REQUIREMENT_ID, default_score
)
from engine.requirements.editor import RequirementEditor, RequirementMutation, MutationKind

__all__ = [
    'Priority', 'GroupType', 'Category', 'Requirement', 'RequirementGroup',
    'RequirementBucket', 'GroupedRequirementBucket', 'ExperienceRequirements',
    'JobRequirementModel', 'RequirementLocation',
    'DEFAULT_SCORES', 'EXPERIENCE_REQUIREMENT_ID', 'default_score',
    'RequirementEditor', 'RequirementMutation', 'MutationKind'
]

#!/usr/bin/env python3
"""
Requirement Editor - The only sanctioned way to mutate a JobRequirementModel.

Every successful edit returns a RequirementMutation. Callers hand that signal
to the staleness protocol, which invalidates every result in the session.
Rejected edits raise before anything is touched and return no signal.
"""

import uuid
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from engine.exceptions import (
    ProtectedRequirementError,
    RequirementEditError,
    RequirementNotFoundError,
)
from engine.requirements.models import (
    EXPERIENCE_REQUIREMENT_ID,
    JobRequirementModel,
    Priority,
    Requirement,
    RequirementLocation,
    default_score,
)

logger = logging.getLogger(__name__)


class MutationKind(str, Enum):
    ADDED = "added"
    PRIORITY_CHANGED = "priority_changed"
    SCORE_CHANGED = "score_changed"
    DELETED = "deleted"


@dataclass(frozen=True)
class RequirementMutation:
    """Signal emitted by every successful requirement edit."""
    kind: MutationKind
    requirement_id: str
    requirement: Optional[Requirement] = None


class RequirementEditor:
    """Edit operations over one JobRequirementModel."""

    def __init__(
        self,
        model: JobRequirementModel,
        id_factory: Optional[Callable[[], str]] = None
    ):
        self.model = model
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))

    def _locate(self, requirement_id: str) -> RequirementLocation:
        location = self.model.find_requirement(requirement_id)
        if location is None:
            if requirement_id == EXPERIENCE_REQUIREMENT_ID:
                raise RequirementEditError(
                    "The minimum-experience requirement is derived from the posting and cannot be edited"
                )
            raise RequirementNotFoundError(f"Requirement not found: {requirement_id}")
        return location

    def _fresh_id(self) -> str:
        existing = {req.id for _, _, req, _ in self.model.iter_requirements()}
        existing.add(EXPERIENCE_REQUIREMENT_ID)
        new_id = self._id_factory()
        while new_id in existing:
            new_id = self._id_factory()
        return new_id

    def add_requirement(self, description: str, priority: Priority, score: int) -> RequirementMutation:
        """Append a user-added requirement to AdditionalRequirements under the given priority."""
        if not description or not description.strip():
            raise RequirementEditError("Requirement description must not be empty")
        if score < 0:
            raise RequirementEditError(f"Requirement score must be >= 0, got {score}")

        priority = Priority(priority)
        requirement = Requirement(
            id=self._fresh_id(),
            description=description.strip(),
            priority=priority,
            score=score,
            original_score=score,
            original_priority=priority,
            is_user_added=True,
        )
        self.model.additional_requirements.bucket(priority).append(requirement)
        logger.info(f"Added requirement {requirement.id} ({priority.value}, {score} pts)")
        return RequirementMutation(MutationKind.ADDED, requirement.id, requirement)

    def change_priority(self, requirement_id: str, new_priority: Priority) -> RequirementMutation:
        """
        Move a requirement to the other priority bucket of its category.

        The score resets to the default for the new priority. Members of a
        requirement group move together with their group.
        """
        new_priority = Priority(new_priority)
        location = self._locate(requirement_id)
        if location.priority == new_priority:
            raise RequirementEditError(
                f"Requirement {requirement_id} is already {new_priority.value}"
            )

        bucket = self.model.category_bucket(location.category)
        entry = location.entry
        location.container.remove(entry)

        members = location.group.requirements if location.group is not None else [location.requirement]
        for req in members:
            req.priority = new_priority
            req.score = default_score(new_priority)

        bucket.bucket(new_priority).append(entry)
        logger.info(
            f"Moved requirement {requirement_id} in {location.category.value} "
            f"from {location.priority.value} to {new_priority.value}"
        )
        return RequirementMutation(MutationKind.PRIORITY_CHANGED, requirement_id, location.requirement)

    def change_score(self, requirement_id: str, new_score: int) -> RequirementMutation:
        """Set a requirement's point value in place."""
        if new_score < 0:
            raise RequirementEditError(f"Requirement score must be >= 0, got {new_score}")
        location = self._locate(requirement_id)
        location.requirement.score = new_score
        logger.info(f"Requirement {requirement_id} score set to {new_score}")
        return RequirementMutation(MutationKind.SCORE_CHANGED, requirement_id, location.requirement)

    def delete_requirement(self, requirement_id: str) -> RequirementMutation:
        """Remove a user-added requirement. Extracted requirements are protected."""
        location = self._locate(requirement_id)
        if not location.requirement.is_user_added:
            raise ProtectedRequirementError(
                f"Requirement {requirement_id} was extracted from the job description and cannot be "
                f"deleted; lower its score instead"
            )
        if location.group is not None:
            if len(location.group.requirements) == 1:
                location.container.remove(location.group)
            else:
                location.group.requirements.remove(location.requirement)
        else:
            location.container.remove(location.requirement)
        logger.info(f"Deleted user-added requirement {requirement_id}")
        return RequirementMutation(MutationKind.DELETED, requirement_id, location.requirement)

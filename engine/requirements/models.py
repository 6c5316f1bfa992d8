#!/usr/bin/env python3
"""
Requirement Models - Canonical representation of a job posting's demands.

The JSON shape follows the requirement extractor output (camel-cased keys,
MUST_HAVE / NICE_TO_HAVE buckets); snake_case field names are accepted too.
"""

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Dict, Any, Iterator, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Priority(str, Enum):
    MUST_HAVE = "MUST_HAVE"
    NICE_TO_HAVE = "NICE_TO_HAVE"

    @property
    def opposite(self) -> "Priority":
        return Priority.NICE_TO_HAVE if self is Priority.MUST_HAVE else Priority.MUST_HAVE


class GroupType(str, Enum):
    ANY = "ANY"
    ALL = "ALL"


class Category(str, Enum):
    """Requirement categories, valued by the label the judge reports."""
    RESPONSIBILITIES = "Responsibilities"
    TECHNICAL_SKILLS = "Technical Skills"
    SOFT_SKILLS = "Soft Skills"
    EXPERIENCE = "Experience"
    EDUCATION = "Education"
    CERTIFICATIONS = "Certifications"
    ADDITIONAL_REQUIREMENTS = "Additional Requirements"


DEFAULT_SCORES: Dict[Priority, int] = {
    Priority.MUST_HAVE: 10,
    Priority.NICE_TO_HAVE: 5,
}

# Sentinel id of the virtual requirement synthesized from Experience years/fields
EXPERIENCE_REQUIREMENT_ID = "exp-must-years"

NOT_FOUND = "Not Found"


def default_score(priority: Priority) -> int:
    """Category default point value for a priority."""
    return DEFAULT_SCORES[Priority(priority)]


class Requirement(BaseModel):
    """Atomic demand extracted from a job posting."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    description: str
    priority: Priority
    score: int = Field(ge=0)
    original_score: int = Field(alias="originalScore", ge=0)
    original_priority: Priority = Field(alias="originalPriority")
    is_user_added: bool = Field(default=False, alias="isUserAdded")

    @model_validator(mode="before")
    @classmethod
    def _snapshot_originals(cls, data: Any) -> Any:
        # Extractor output may omit ids and the original snapshots
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if not data.get("id"):
            data["id"] = str(uuid.uuid4())
        if "originalScore" not in data and "original_score" not in data:
            data["originalScore"] = data.get("score")
        if "originalPriority" not in data and "original_priority" not in data:
            data["originalPriority"] = data.get("priority")
        return data

    @property
    def is_modified(self) -> bool:
        """True once a user changed the score or priority."""
        return self.score != self.original_score or self.priority != self.original_priority


class RequirementGroup(BaseModel):
    """Requirements evaluated jointly: ANY member aligned, or ALL members aligned."""
    model_config = ConfigDict(populate_by_name=True)

    group_type: GroupType = Field(alias="groupType")
    requirements: List[Requirement] = Field(min_length=1)

    @property
    def description(self) -> str:
        joiner = " OR " if self.group_type == GroupType.ANY else " AND "
        return joiner.join(r.description for r in self.requirements)

    @property
    def points(self) -> int:
        """A group verdict is worth one requirement: its highest-scoring member."""
        return max(r.score for r in self.requirements)

    @property
    def requirement_ids(self) -> List[str]:
        return [r.id for r in self.requirements]


class RequirementBucket(BaseModel):
    """MUST_HAVE / NICE_TO_HAVE lists of plain requirements."""
    model_config = ConfigDict(populate_by_name=True)

    must_have: List[Requirement] = Field(default_factory=list, alias="MUST_HAVE")
    nice_to_have: List[Requirement] = Field(default_factory=list, alias="NICE_TO_HAVE")

    def bucket(self, priority: Priority) -> List[Requirement]:
        return self.must_have if Priority(priority) is Priority.MUST_HAVE else self.nice_to_have


class GroupedRequirementBucket(BaseModel):
    """MUST_HAVE / NICE_TO_HAVE lists of requirement groups."""
    model_config = ConfigDict(populate_by_name=True)

    must_have: List[RequirementGroup] = Field(default_factory=list, alias="MUST_HAVE")
    nice_to_have: List[RequirementGroup] = Field(default_factory=list, alias="NICE_TO_HAVE")

    def bucket(self, priority: Priority) -> List[RequirementGroup]:
        return self.must_have if Priority(priority) is Priority.MUST_HAVE else self.nice_to_have


class ExperienceRequirements(RequirementBucket):
    """
    Experience demands.

    The minimum years and fields become one virtual MUST_HAVE requirement at
    evaluation time; further experience demands live in the buckets.
    """
    years: str = Field(default="", alias="Years")
    domains: List[str] = Field(default_factory=list, alias="Fields")

    @model_validator(mode="before")
    @classmethod
    def _unwrap_must_have_tuple(cls, data: Any) -> Any:
        # Extractor shape: {"MUST_HAVE": {"Years": ..., "Fields": [...]}, "NICE_TO_HAVE": [...]}
        if isinstance(data, dict) and isinstance(data.get("MUST_HAVE"), dict):
            data = dict(data)
            tuple_part = data.pop("MUST_HAVE")
            data.setdefault("Years", tuple_part.get("Years", ""))
            data.setdefault("Fields", tuple_part.get("Fields", []))
        return data

    def synthesized_requirement(self) -> Optional[Requirement]:
        """The virtual years-in-fields requirement, or None when no years are stated."""
        if not self.years or self.years == NOT_FOUND:
            return None
        score = default_score(Priority.MUST_HAVE)
        return Requirement(
            id=EXPERIENCE_REQUIREMENT_ID,
            description=f"{self.years} in {', '.join(self.domains)}",
            priority=Priority.MUST_HAVE,
            score=score,
            original_score=score,
            original_priority=Priority.MUST_HAVE,
        )


@dataclass
class RequirementLocation:
    """Where a requirement lives inside a JobRequirementModel."""
    category: Category
    priority: Priority
    requirement: Requirement
    container: List[Union[Requirement, RequirementGroup]]
    group: Optional[RequirementGroup] = None

    @property
    def entry(self) -> Union[Requirement, RequirementGroup]:
        """The item stored in the bucket list: the group for grouped members."""
        return self.group if self.group is not None else self.requirement


class JobRequirementModel(BaseModel):
    """The full structured posting."""
    model_config = ConfigDict(populate_by_name=True)

    position_number: str = Field(default=NOT_FOUND, alias="PositionNumber")
    job_code: str = Field(default=NOT_FOUND, alias="JobCode")
    pay_grade: str = Field(default=NOT_FOUND, alias="PayGrade")
    job_title: str = Field(default=NOT_FOUND, alias="JobTitle")
    department: str = Field(default=NOT_FOUND, alias="Department")
    company: str = Field(default=NOT_FOUND, alias="Company")
    location: str = Field(default=NOT_FOUND, alias="Location")
    date_approved: str = Field(default=NOT_FOUND, alias="DateApproved")
    principal_objective: str = Field(default="", alias="PrincipalObjective")
    reports_to: List[str] = Field(default_factory=list, alias="ReportsTo")
    interfaces_with: List[str] = Field(default_factory=list, alias="InterfacesWith")

    responsibilities: RequirementBucket = Field(default_factory=RequirementBucket, alias="Responsibilities")
    technical_skills: RequirementBucket = Field(default_factory=RequirementBucket, alias="TechnicalSkills")
    soft_skills: RequirementBucket = Field(default_factory=RequirementBucket, alias="SoftSkills")
    experience: ExperienceRequirements = Field(default_factory=ExperienceRequirements, alias="Experience")
    education: GroupedRequirementBucket = Field(default_factory=GroupedRequirementBucket, alias="Education")
    certifications: GroupedRequirementBucket = Field(default_factory=GroupedRequirementBucket, alias="Certifications")
    additional_requirements: RequirementBucket = Field(
        default_factory=RequirementBucket, alias="AdditionalRequirements"
    )

    @model_validator(mode="before")
    @classmethod
    def _flatten_extractor_layout(cls, data: Any) -> Any:
        # Extractor nests skills/experience/education under "Requirements" and
        # reporting lines under "OrganizationalRelationship"
        if not isinstance(data, dict):
            return data
        data = dict(data)
        nested = data.pop("Requirements", None)
        if isinstance(nested, dict):
            for key, value in nested.items():
                if value is not None:
                    data.setdefault(key, value)
        org = data.pop("OrganizationalRelationship", None)
        if isinstance(org, dict):
            data.setdefault("ReportsTo", org.get("ReportsTo", []))
            data.setdefault("InterfacesWith", org.get("InterfacesWith", []))
        if data.get("AdditionalRequirements") is None:
            data.pop("AdditionalRequirements", None)
        return data

    @model_validator(mode="after")
    def _check_unique_ids(self) -> "JobRequirementModel":
        seen = set()
        for _, _, req, _ in self.iter_requirements():
            if req.id in seen:
                raise ValueError(f"Duplicate requirement id: {req.id}")
            seen.add(req.id)
        if EXPERIENCE_REQUIREMENT_ID in seen:
            raise ValueError(f"Requirement id '{EXPERIENCE_REQUIREMENT_ID}' is reserved")
        return self

    def flat_categories(self) -> List[Tuple[Category, RequirementBucket]]:
        return [
            (Category.RESPONSIBILITIES, self.responsibilities),
            (Category.TECHNICAL_SKILLS, self.technical_skills),
            (Category.SOFT_SKILLS, self.soft_skills),
            (Category.EXPERIENCE, self.experience),
            (Category.ADDITIONAL_REQUIREMENTS, self.additional_requirements),
        ]

    def grouped_categories(self) -> List[Tuple[Category, GroupedRequirementBucket]]:
        return [
            (Category.EDUCATION, self.education),
            (Category.CERTIFICATIONS, self.certifications),
        ]

    def iter_requirements(
        self,
    ) -> Iterator[Tuple[Category, Priority, Requirement, Optional[RequirementGroup]]]:
        """Yield every stored requirement with its category, bucket priority and group."""
        for category, bucket in self.flat_categories():
            for priority in Priority:
                for req in bucket.bucket(priority):
                    yield category, priority, req, None
        for category, grouped in self.grouped_categories():
            for priority in Priority:
                for group in grouped.bucket(priority):
                    for req in group.requirements:
                        yield category, priority, req, group

    def iter_groups(self) -> Iterator[Tuple[Category, Priority, RequirementGroup]]:
        for category, grouped in self.grouped_categories():
            for priority in Priority:
                for group in grouped.bucket(priority):
                    yield category, priority, group

    def find_requirement(self, requirement_id: str) -> Optional[RequirementLocation]:
        """Locate a stored requirement by id (the synthesized experience requirement is not stored)."""
        for category, bucket in self.flat_categories():
            for priority in Priority:
                container = bucket.bucket(priority)
                for req in container:
                    if req.id == requirement_id:
                        return RequirementLocation(category, priority, req, container)
        for category, grouped in self.grouped_categories():
            for priority in Priority:
                container = grouped.bucket(priority)
                for group in container:
                    for req in group.requirements:
                        if req.id == requirement_id:
                            return RequirementLocation(category, priority, req, container, group)
        return None

    def category_bucket(self, category: Category) -> Union[RequirementBucket, GroupedRequirementBucket]:
        for cat, bucket in self.flat_categories() + self.grouped_categories():
            if cat == category:
                return bucket
        raise KeyError(category)

    def mark_extracted(self) -> "JobRequirementModel":
        """
        Post-process fresh extractor output in place.

        Every requirement takes the priority of the bucket it sits in, is
        flagged as extracted, and has its originals snapshotted from its
        current values.
        """
        for _, priority, req, _ in self.iter_requirements():
            req.priority = priority
            req.original_score = req.score
            req.original_priority = priority
            req.is_user_added = False
        return self

    def to_judge_payload(self) -> Dict[str, Any]:
        """Serialized form sent to the judge, with the synthesized experience requirement inline."""
        payload = self.model_dump(mode="json", by_alias=True)
        synthesized = self.experience.synthesized_requirement()
        if synthesized is not None:
            payload["Experience"]["MUST_HAVE"] = (
                [synthesized.model_dump(mode="json", by_alias=True)] + payload["Experience"]["MUST_HAVE"]
            )
        return payload

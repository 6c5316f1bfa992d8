"""
Judge I/O models and the JSON schemas sent with each request.

Pydantic models validate what comes back; the *_SCHEMA dicts are the wrapped
{'name', 'strict', 'schema'} specs handed to the provider.
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from engine.requirements.models import Priority


class AlignmentStatus(str, Enum):
    ALIGNED = "Aligned"
    PARTIALLY_ALIGNED = "Partially Aligned"
    NOT_ALIGNED = "Not Aligned"
    NOT_MENTIONED = "Not Mentioned"


class AlignmentVerdict(BaseModel):
    """The judge's raw opinion on one requirement (or one requirement group)."""
    model_config = ConfigDict(populate_by_name=True)

    category: str
    requirement: str
    priority: Priority
    status: AlignmentStatus
    justification: str = ""
    requirement_id: Optional[str] = Field(default=None, alias="requirementId")


class CandidateProfile(BaseModel):
    """Pre-parsed candidate data; the source of truth for name, email and experience."""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    email: Optional[str] = None
    total_experience: Optional[str] = Field(default=None, alias="totalExperience")
    experience_calculated_at: Optional[str] = Field(default=None, alias="experienceCalculatedAt")


class JudgeResponse(BaseModel):
    """Everything the judge returns for one candidate."""
    model_config = ConfigDict(populate_by_name=True)

    candidate_name: str = Field(default="", alias="candidateName")
    email: Optional[str] = None
    total_experience: Optional[str] = Field(default=None, alias="totalExperience")
    alignment_summary: str = Field(default="", alias="alignmentSummary")
    alignment_details: Optional[List[AlignmentVerdict]] = Field(default=None, alias="alignmentDetails")
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    interview_probes: List[str] = Field(default_factory=list, alias="interviewProbes")


_STRING = {"type": "string"}
_STRING_LIST = {"type": "array", "items": {"type": "string"}}
_PRIORITY = {"type": "string", "enum": [p.value for p in Priority]}

JUDGE_RESPONSE_SCHEMA = {
    "name": "candidate_alignment_schema",
    "strict": True,
    "schema": {
        "type": "object",
        "properties": {
            "candidateName": {
                "type": "string",
                "description": "Full name of the candidate as written in the CV."
            },
            "email": {
                "type": ["string", "null"],
                "description": "Primary email address from the CV, or null."
            },
            "totalExperience": {
                "type": ["string", "null"],
                "description": "Total years of professional experience, or null."
            },
            "alignmentSummary": {
                "type": "string",
                "description": "Concise summary of the candidate's alignment with the requirements."
            },
            "alignmentDetails": {
                "type": "array",
                "description": "One entry per requirement, and one entry per requirement group.",
                "items": {
                    "type": "object",
                    "properties": {
                        "requirementId": {
                            "type": ["string", "null"],
                            "description": "The 'id' of the requirement being judged. For a group, the id of any member."
                        },
                        "category": {
                            "type": "string",
                            "enum": [
                                "Responsibilities", "Technical Skills", "Soft Skills", "Experience",
                                "Education", "Certifications", "Additional Requirements"
                            ]
                        },
                        "requirement": {
                            "type": "string",
                            "description": "The requirement description, copied verbatim. For a group, a summary of the group."
                        },
                        "priority": _PRIORITY,
                        "status": {
                            "type": "string",
                            "enum": [s.value for s in AlignmentStatus]
                        },
                        "justification": {
                            "type": "string",
                            "description": "Brief justification citing evidence from the CV."
                        }
                    },
                    "required": ["requirementId", "category", "requirement", "priority", "status", "justification"],
                    "additionalProperties": False
                }
            },
            "strengths": _STRING_LIST,
            "weaknesses": _STRING_LIST,
            "interviewProbes": _STRING_LIST
        },
        "required": [
            "candidateName", "email", "totalExperience", "alignmentSummary",
            "alignmentDetails", "strengths", "weaknesses", "interviewProbes"
        ],
        "additionalProperties": False
    }
}


def _requirement_list(description: str) -> dict:
    return {
        "type": "array",
        "description": description,
        "items": {
            "type": "object",
            "properties": {
                "id": _STRING,
                "description": _STRING,
                "priority": _PRIORITY,
                "score": {"type": "integer", "description": "10 for MUST_HAVE, 5 for NICE_TO_HAVE."}
            },
            "required": ["id", "description", "priority", "score"]
        }
    }


def _bucket(label: str) -> dict:
    return {
        "type": "object",
        "properties": {
            "MUST_HAVE": _requirement_list(f"Must-have {label}."),
            "NICE_TO_HAVE": _requirement_list(f"Nice-to-have {label}.")
        },
        "required": ["MUST_HAVE", "NICE_TO_HAVE"]
    }


def _group_list(description: str) -> dict:
    return {
        "type": "array",
        "description": description,
        "items": {
            "type": "object",
            "properties": {
                "groupType": {"type": "string", "enum": ["ANY", "ALL"]},
                "requirements": _requirement_list("Alternatives (ANY) or joint demands (ALL).")
            },
            "required": ["groupType", "requirements"]
        }
    }


def _grouped_bucket(label: str) -> dict:
    return {
        "type": "object",
        "properties": {
            "MUST_HAVE": _group_list(f"Must-have {label} groups."),
            "NICE_TO_HAVE": _group_list(f"Nice-to-have {label} groups.")
        },
        "required": ["MUST_HAVE", "NICE_TO_HAVE"]
    }


REQUIREMENT_EXTRACTION_SCHEMA = {
    "name": "job_requirement_schema",
    "strict": False,
    "schema": {
        "type": "object",
        "properties": {
            "PositionNumber": _STRING,
            "JobCode": _STRING,
            "PayGrade": _STRING,
            "JobTitle": _STRING,
            "Department": _STRING,
            "Company": _STRING,
            "Location": _STRING,
            "DateApproved": _STRING,
            "PrincipalObjective": _STRING,
            "OrganizationalRelationship": {
                "type": "object",
                "properties": {
                    "ReportsTo": _STRING_LIST,
                    "InterfacesWith": _STRING_LIST
                }
            },
            "Responsibilities": _bucket("responsibilities"),
            "Requirements": {
                "type": "object",
                "properties": {
                    "TechnicalSkills": _bucket("technical skills"),
                    "SoftSkills": _bucket("soft skills"),
                    "Experience": {
                        "type": "object",
                        "properties": {
                            "MUST_HAVE": {
                                "type": "object",
                                "properties": {
                                    "Years": {"type": "string", "description": "Minimum years, e.g. '5+ years'."},
                                    "Fields": _STRING_LIST
                                },
                                "required": ["Years", "Fields"]
                            },
                            "NICE_TO_HAVE": _requirement_list("Nice-to-have experience.")
                        },
                        "required": ["MUST_HAVE", "NICE_TO_HAVE"]
                    },
                    "Education": _grouped_bucket("education"),
                    "Certifications": _grouped_bucket("certification"),
                    "AdditionalRequirements": _bucket("additional requirements")
                },
                "required": ["TechnicalSkills", "SoftSkills", "Experience", "Education", "Certifications"]
            }
        },
        "required": ["JobTitle", "Responsibilities", "Requirements"]
    }
}

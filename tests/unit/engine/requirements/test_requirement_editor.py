"""
Tests for RequirementEditor.

Every successful edit returns a mutation signal; rejected edits raise and
leave the model untouched.
"""
import pytest

from engine.exceptions import (
    ProtectedRequirementError,
    RequirementEditError,
    RequirementNotFoundError,
)
from engine.requirements.editor import MutationKind, RequirementEditor
from engine.requirements.models import EXPERIENCE_REQUIREMENT_ID, Priority


@pytest.fixture
def editor(requirement_model):
    ids = iter(["user-1", "user-2", "user-3"])
    return RequirementEditor(requirement_model, id_factory=lambda: next(ids))


class TestAddRequirement:

    def test_appends_to_additional_requirements(self, editor, requirement_model):
        mutation = editor.add_requirement("Security clearance", Priority.MUST_HAVE, 8)

        assert mutation.kind == MutationKind.ADDED
        assert mutation.requirement_id == "user-1"
        added = requirement_model.additional_requirements.must_have[-1]
        assert added.id == "user-1"
        assert added.description == "Security clearance"
        assert added.score == 8
        assert added.original_score == 8
        assert added.original_priority == Priority.MUST_HAVE
        assert added.is_user_added is True

    def test_generated_ids_are_unique(self, requirement_model):
        ids = iter(["tech-java", EXPERIENCE_REQUIREMENT_ID, "fresh"])
        editor = RequirementEditor(requirement_model, id_factory=lambda: next(ids))

        mutation = editor.add_requirement("On-call rotation", "NICE_TO_HAVE", 5)

        assert mutation.requirement_id == "fresh"

    def test_default_id_factory_produces_uuid(self, requirement_model):
        mutation = RequirementEditor(requirement_model).add_requirement("Travel", Priority.NICE_TO_HAVE, 5)

        assert len(mutation.requirement_id) == 36

    @pytest.mark.parametrize("description,score", [("   ", 5), ("Valid", -1)])
    def test_invalid_input_rejected(self, editor, requirement_model, description, score):
        before = requirement_model.model_dump()

        with pytest.raises(RequirementEditError):
            editor.add_requirement(description, Priority.MUST_HAVE, score)

        assert requirement_model.model_dump() == before


class TestChangePriority:

    def test_moves_and_resets_score(self, editor, requirement_model):
        requirement_model.technical_skills.nice_to_have[0].score = 2

        mutation = editor.change_priority("tech-aws", Priority.MUST_HAVE)

        assert mutation.kind == MutationKind.PRIORITY_CHANGED
        assert [r.id for r in requirement_model.technical_skills.nice_to_have] == []
        moved = requirement_model.technical_skills.must_have[-1]
        assert moved.id == "tech-aws"
        assert moved.priority == Priority.MUST_HAVE
        assert moved.score == 10
        assert moved.original_priority == Priority.NICE_TO_HAVE

    def test_demotion_resets_to_nice_to_have_default(self, editor, requirement_model):
        editor.change_priority("tech-java", Priority.NICE_TO_HAVE)

        moved = requirement_model.find_requirement("tech-java")
        assert moved.priority == Priority.NICE_TO_HAVE
        assert moved.requirement.score == 5

    def test_grouped_member_moves_whole_group(self, editor, requirement_model):
        editor.change_priority("edu-beng", Priority.NICE_TO_HAVE)

        assert requirement_model.education.must_have == []
        group = requirement_model.education.nice_to_have[0]
        assert group.requirement_ids == ["edu-bsc", "edu-beng"]
        assert all(r.priority == Priority.NICE_TO_HAVE and r.score == 5 for r in group.requirements)

    def test_same_priority_rejected(self, editor, requirement_model):
        before = requirement_model.model_dump()

        with pytest.raises(RequirementEditError):
            editor.change_priority("tech-java", Priority.MUST_HAVE)

        assert requirement_model.model_dump() == before

    def test_unknown_id_rejected(self, editor):
        with pytest.raises(RequirementNotFoundError):
            editor.change_priority("missing", Priority.MUST_HAVE)

    def test_synthesized_experience_requirement_not_editable(self, editor):
        with pytest.raises(RequirementEditError):
            editor.change_priority(EXPERIENCE_REQUIREMENT_ID, Priority.NICE_TO_HAVE)


class TestChangeScore:

    def test_updates_in_place(self, editor, requirement_model):
        mutation = editor.change_score("cert-cka", 7)

        assert mutation.kind == MutationKind.SCORE_CHANGED
        location = requirement_model.find_requirement("cert-cka")
        assert location.requirement.score == 7
        assert location.requirement.original_score == 3
        assert location.priority == Priority.NICE_TO_HAVE

    def test_zero_is_allowed(self, editor, requirement_model):
        editor.change_score("tech-java", 0)

        assert requirement_model.find_requirement("tech-java").requirement.score == 0

    def test_negative_rejected(self, editor, requirement_model):
        with pytest.raises(RequirementEditError):
            editor.change_score("tech-java", -3)

        assert requirement_model.find_requirement("tech-java").requirement.score == 10


class TestDeleteRequirement:

    def test_user_added_requirement_deleted(self, editor, requirement_model):
        added = editor.add_requirement("Portfolio", Priority.NICE_TO_HAVE, 5)

        mutation = editor.delete_requirement(added.requirement_id)

        assert mutation.kind == MutationKind.DELETED
        assert requirement_model.find_requirement(added.requirement_id) is None

    def test_extracted_requirement_protected(self, editor, requirement_model):
        before = requirement_model.model_dump()

        with pytest.raises(ProtectedRequirementError):
            editor.delete_requirement("tech-java")

        assert requirement_model.model_dump() == before

    def test_protected_error_is_an_edit_error(self):
        assert issubclass(ProtectedRequirementError, RequirementEditError)

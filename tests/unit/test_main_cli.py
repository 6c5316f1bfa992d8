"""
Tests for the command-line entry point.
"""
import json
from unittest.mock import Mock, patch

import pytest

import main
from assessment.runner import AssessmentRunner
from engine.app_context import AppContext
from engine.cache.extraction_cache import InMemoryExtractionCache
from engine.config_loader import AppConfig, RetryConfig
from tests.fixtures.requirement_fixtures import build_java_aws_model, java_aligned_response
from tests.mocks.judge_mocks import RecordingSleep, ScriptedExtractor, ScriptedJudge


@pytest.fixture
def fake_context():
    judge = ScriptedJudge(by_cv={
        "Jane's CV": [java_aligned_response()],
        "Bob's CV": [RuntimeError("503")] * 3,
    })
    return AppContext(
        config=AppConfig(),
        judge=judge,
        extractor=ScriptedExtractor(build_java_aws_model()),
        runner=AssessmentRunner(judge, retry_config=RetryConfig(max_attempts=3), sleep=RecordingSleep()),
        cache=InMemoryExtractionCache(),
    )


@pytest.fixture
def run_cli(fake_context):
    def run(argv):
        with patch.object(main, "load_config", return_value=AppConfig()), \
                patch.object(main.AppContext, "build", return_value=fake_context):
            return main.main(argv)
    return run


def test_extract_writes_requirement_model(tmp_path, run_cli):
    jd = tmp_path / "role.txt"
    jd.write_text("Senior Java engineer")
    out = tmp_path / "model.json"

    exit_code = run_cli(["extract", str(jd), "-o", str(out)])

    assert exit_code == 0
    data = json.loads(out.read_text())
    assert data["TechnicalSkills"]["MUST_HAVE"][0]["id"] == "tech-java"


def test_assess_reports_results_and_failures(tmp_path, run_cli):
    requirements = tmp_path / "model.json"
    requirements.write_text(json.dumps(build_java_aws_model().model_dump(mode="json", by_alias=True)))
    jane = tmp_path / "jane.txt"
    jane.write_text("Jane's CV")
    bob = tmp_path / "bob.txt"
    bob.write_text("Bob's CV")
    out = tmp_path / "report.json"

    exit_code = run_cli([
        "assess", "--requirements", str(requirements), str(jane), str(bob), "--issues-only", "-o", str(out)
    ])

    assert exit_code == 1
    report = json.loads(out.read_text())
    assert report["jdName"] == "model.json"
    assert len(report["candidates"]) == 1
    analysis = report["candidates"][0]["analysis"]
    assert analysis["candidate_name"] == "Jane Doe"
    assert analysis["alignment_score"] == 100.0
    assert analysis["recommendation"] == "Strongly Recommended"
    # Only the Not Mentioned AWS row is an issue
    assert [d["requirement"] for d in analysis["alignment_details"]] == ["AWS"]
    assert report["failed"][0]["name"] == "bob.txt"


def test_assess_with_profiles(tmp_path, run_cli):
    requirements = tmp_path / "model.json"
    requirements.write_text(json.dumps(build_java_aws_model().model_dump(mode="json", by_alias=True)))
    jane = tmp_path / "jane.txt"
    jane.write_text("Jane's CV")
    profiles = tmp_path / "profiles.json"
    profiles.write_text(json.dumps({"jane.txt": {"name": "JANE Q PUBLIC", "email": "jq@example.com"}}))
    out = tmp_path / "report.json"

    exit_code = run_cli([
        "assess", "--requirements", str(requirements), str(jane), "--profiles", str(profiles), "-o", str(out)
    ])

    assert exit_code == 0
    analysis = json.loads(out.read_text())["candidates"][0]["analysis"]
    assert analysis["candidate_name"] == "Jane Q Public"
    assert analysis["email"] == "jq@example.com"
    assert len(analysis["alignment_details"]) == 2


def test_requirement_source_is_required():
    with pytest.raises(SystemExit):
        main.build_parser().parse_args(["assess", "cv.txt"])

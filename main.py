import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Dict, List, Optional

from engine.app_context import AppContext
from engine.config_loader import load_config
from engine.exceptions import EngineException
from engine.llm.schema_models import CandidateProfile
from engine.requirements.models import JobRequirementModel
from assessment.runner import CandidateUpload
from assessment.session import AssessmentSession

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def read_text(path: str) -> str:
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def load_profiles(profiles_path: Optional[str]) -> Dict[str, CandidateProfile]:
    """Load pre-parsed profiles keyed by CV file name."""
    if not profiles_path:
        return {}
    logger.info(f"Loading candidate profiles from {profiles_path}")
    with open(profiles_path, 'r', encoding='utf-8') as f:
        raw = json.load(f)
    return {name: CandidateProfile.model_validate(data) for name, data in raw.items()}


def write_json(data, output_path: Optional[str]) -> None:
    text = json.dumps(data, indent=2)
    if output_path:
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(text)
        logger.info(f"Wrote {output_path}")
    else:
        sys.stdout.write(text + "\n")


async def run_extract(ctx: AppContext, args) -> int:
    model = await ctx.extract(read_text(args.jd))
    write_json(model.model_dump(mode="json", by_alias=True), args.output)
    return 0


async def run_assess(ctx: AppContext, args) -> int:
    if args.requirements:
        with open(args.requirements, 'r', encoding='utf-8') as f:
            model = JobRequirementModel.model_validate(json.load(f))
        jd_name = args.name or os.path.basename(args.requirements)
    else:
        model = await ctx.extract(read_text(args.jd))
        jd_name = args.name or os.path.basename(args.jd)

    profiles = load_profiles(args.profiles)
    uploads: List[CandidateUpload] = []
    for cv_path in args.cvs:
        cv_name = os.path.basename(cv_path)
        uploads.append(CandidateUpload(cv_name, read_text(cv_path), profiles.get(cv_name)))

    session = AssessmentSession(jd_name=jd_name, requirement_model=model)
    outcome = await ctx.runner.run_batch(session, uploads)

    report = session.to_dict(only_issues=args.issues_only)
    report["failed"] = [{"name": name, "reason": reason} for name, reason in outcome.failed]
    report["skipped"] = outcome.skipped
    write_json(report, args.output)
    return 0 if outcome.success else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="CV alignment scoring engine")
    parser.add_argument('--config', type=str, default='config.yaml',
                        help='Path to the YAML configuration file')
    subparsers = parser.add_subparsers(dest='command', required=True)

    extract = subparsers.add_parser('extract', help='Structure a job description into a requirement model')
    extract.add_argument('jd', help='Job description text file')
    extract.add_argument('-o', '--output', help='Write JSON here instead of stdout')

    assess = subparsers.add_parser('assess', help='Assess CVs against a job description')
    source = assess.add_mutually_exclusive_group(required=True)
    source.add_argument('--requirements', help='Requirement model JSON file')
    source.add_argument('--jd', help='Job description text file (extracted first)')
    assess.add_argument('cvs', nargs='+', help='CV text files')
    assess.add_argument('--profiles', help='JSON object of pre-parsed profiles keyed by CV file name')
    assess.add_argument('--name', help='Session name (defaults to the input file name)')
    assess.add_argument('--issues-only', action='store_true',
                        help='Only report requirements that are not fully aligned')
    assess.add_argument('-o', '--output', help='Write JSON here instead of stdout')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config(args.config)
    ctx = AppContext.build(config)

    handler = run_extract if args.command == 'extract' else run_assess
    try:
        return asyncio.run(handler(ctx, args))
    except EngineException as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

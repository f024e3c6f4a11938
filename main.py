"""CLI entry point for the résumé screening engine."""

import argparse
import logging
import sys
from pathlib import Path

from screener.core.config import SEMANTIC_PROVIDERS, ScoringConfig, SemanticConfig, Settings
from screener.core.errors import EmptyInputError
from screener.core.schemas import JobRequirement, MultiJobScoreSet, ScreeningReport
from screener.pipeline.domains import DomainCatalog, default_catalog
from screener.pipeline.orchestrator import export_report_json, screen_candidates
from screener.pipeline.presets import PREDEFINED_JOBS, get_preset
from screener.pipeline.semantic import SemanticScorer, build_semantic_scorer
from screener.profile.extractor import extract_profile, load_resume_text
from screener.profile.schema import CandidateProfile

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Résumé screening engine - extract candidate profiles and rank them against jobs",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- extract-profile subcommand ---
    extract_parser = subparsers.add_parser(
        "extract-profile",
        help="Extract a candidate profile from a plain-text résumé",
    )
    extract_parser.add_argument(
        "--resume",
        required=True,
        help="Path to a plain-text résumé",
    )
    extract_parser.add_argument(
        "--output",
        help="Write the profile YAML to this path",
    )
    _add_semantic_args(extract_parser)
    _add_verbose_arg(extract_parser)

    # --- screen subcommand ---
    screen_parser = subparsers.add_parser(
        "screen",
        help="Screen résumés against one job (single mode) or several (multi mode)",
    )
    screen_parser.add_argument(
        "--resumes",
        nargs="+",
        required=True,
        help="Plain-text résumé files",
    )
    screen_parser.add_argument(
        "--config",
        help="Settings YAML with jobs, scoring and semantic sections",
    )
    screen_parser.add_argument(
        "--preset",
        action="append",
        choices=sorted(PREDEFINED_JOBS),
        help="Predefined job to screen against (repeatable)",
    )
    screen_parser.add_argument(
        "--threshold",
        type=int,
        help="Qualifying score threshold (default from config, else 50)",
    )
    screen_parser.add_argument(
        "--workers",
        type=int,
        help="Number of scoring threads (default from config, else 4)",
    )
    screen_parser.add_argument(
        "--multi",
        action="store_true",
        help="Use multi-job mode even when screening against a single job",
    )
    screen_parser.add_argument(
        "--export",
        choices=["json"],
        help="Export the report to format (json)",
    )
    screen_parser.add_argument(
        "--output",
        help="Write the exported report to this path instead of stdout",
    )
    _add_semantic_args(screen_parser)
    _add_verbose_arg(screen_parser)

    # --- presets subcommand ---
    presets_parser = subparsers.add_parser("presets", help="List predefined jobs")
    _add_verbose_arg(presets_parser)

    return parser.parse_args(argv)


def _add_semantic_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--semantic",
        action="store_true",
        help="Enable LLM-backed semantic augmentation",
    )
    parser.add_argument(
        "--provider",
        choices=list(SEMANTIC_PROVIDERS),
        help="LLM provider for semantic augmentation (default: gemini)",
    )


def _add_verbose_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _semantic_config(base: SemanticConfig, args: argparse.Namespace) -> SemanticConfig:
    update: dict[str, object] = {}
    if args.semantic:
        update["enabled"] = True
    if args.provider:
        update["provider"] = args.provider
    return base.model_copy(update=update) if update else base


def cmd_extract_profile(args: argparse.Namespace) -> None:
    """Handle extract-profile subcommand."""
    semantic = build_semantic_scorer(_semantic_config(SemanticConfig(), args))
    try:
        text = load_resume_text(args.resume)
        profile = extract_profile(text, semantic=semantic)
    finally:
        semantic.close()

    print(f"Profile extracted from {args.resume}")
    print(f"  Name: {profile.name}")
    print(f"  Email: {profile.email or '-'}")
    print(f"  Phone: {profile.phone or '-'}")
    print(f"  Skills ({len(profile.skills)}): {', '.join(profile.skills) or '-'}")
    print(f"  Experience: {profile.experience.years} years {profile.experience.positions or ''}")
    print(f"  Education: {profile.education}")
    print(f"  Confidence: {profile.confidence}%")

    if args.output:
        profile.to_yaml(args.output)
        print(f"Profile written to {args.output}")


def _load_jobs(args: argparse.Namespace, settings: Settings) -> list[JobRequirement]:
    if args.preset:
        return [get_preset(key) for key in args.preset]
    if settings.jobs:
        return list(settings.jobs)
    msg = "No jobs to screen against: pass --preset or a --config with a 'jobs' section"
    raise ValueError(msg)


def _load_profiles(paths: list[str], semantic: SemanticScorer, settings: Settings) -> list[CandidateProfile]:
    profiles: list[CandidateProfile] = []
    for path in paths:
        text = load_resume_text(path)
        try:
            profiles.append(extract_profile(
                text,
                max_skills=settings.scoring.max_skills,
                semantic=semantic,
                min_skills_before_augment=settings.semantic.min_skills_before_augment,
            ))
        except EmptyInputError:
            logger.warning("Skipping empty résumé: %s", path)
    return profiles


def cmd_screen(args: argparse.Namespace) -> None:
    """Handle screen subcommand."""
    settings = Settings.from_yaml(args.config) if args.config else Settings()

    scoring_update: dict[str, object] = {}
    if args.threshold is not None:
        scoring_update["qualifying_threshold"] = args.threshold
    if args.workers is not None:
        scoring_update["max_workers"] = args.workers
    scoring = ScoringConfig.model_validate({**settings.scoring.model_dump(), **scoring_update})
    semantic_config = _semantic_config(settings.semantic, args)
    settings = settings.model_copy(update={"scoring": scoring, "semantic": semantic_config})

    catalog = DomainCatalog.from_yaml(settings.catalog_path) if settings.catalog_path else default_catalog()
    jobs = _load_jobs(args, settings)

    semantic = build_semantic_scorer(semantic_config)
    try:
        profiles = _load_profiles(args.resumes, semantic, settings)
        report = screen_candidates(
            profiles,
            jobs,
            scoring,
            catalog=catalog,
            semantic=semantic,
            semantic_config=semantic_config,
            mode="multi" if args.multi else None,
        )
    finally:
        semantic.close()

    _print_report(report, jobs)

    if args.export == "json":
        output = export_report_json(report)
        if args.output:
            Path(args.output).write_text(output)
            print(f"\nReport written to {args.output}")
        else:
            print(f"\n{output}")


def _print_report(report: ScreeningReport, jobs: list[JobRequirement]) -> None:
    titles = ", ".join(job.title for job in jobs)
    print(f"\nScreening complete ({report.mode} mode) against: {titles}")

    for rank, result in enumerate(report.ranked(), start=1):
        if isinstance(result, MultiJobScoreSet):
            best = result.best_job
            print(f"  {rank:>2}. {result.candidate_name}: best {best.title} {best.score} ({best.category})")
            for title, scored in result.scores.items():
                print(f"        {title}: {scored.score}")
        else:
            flag = "" if result.valid else " [invalid]"
            print(f"  {rank:>2}. {result.candidate_name or '-'}: {result.score} "
                  f"({result.domain_category}){flag}")
            print(f"        skills {result.skills_match.percentage}% - "
                  f"missing: {', '.join(result.skills_match.missing) or 'none'}")

    stats = report.statistics
    dist = stats.score_distribution
    print(f"\n{stats.qualified_candidates}/{stats.total_candidates} qualified "
          f"({stats.qualification_rate}%), average {stats.average_score}, top {stats.top_score}")
    print(f"  excellent {dist.excellent}, good {dist.good}, average {dist.average}, poor {dist.poor}")
    for category in stats.category_breakdown or []:
        print(f"  {category.category}: {category.candidate_count} candidates, "
              f"average {category.average_score}")

    pool = report.candidate_pool
    if pool is not None and pool.total_profiles:
        skills = ", ".join(f"{s.skill} ({s.count})" for s in pool.top_skills)
        print(f"\nCandidate pool ({pool.total_profiles} profiles)")
        print(f"  Top skills: {skills or 'none'}")
        print("  Experience: " + ", ".join(f"{b.label} {b.count}" for b in pool.experience_distribution))
        print("  Education: " + ", ".join(
            f"{e.level} {e.count}" for e in pool.education_distribution if e.count
        ))


def cmd_presets(args: argparse.Namespace) -> None:
    """Handle presets subcommand."""
    for key, job in PREDEFINED_JOBS.items():
        print(f"{key}: {job.title} ({job.min_experience:g}-{job.max_experience:g} years)")
        print(f"  Skills: {', '.join(job.required_skills)}")


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.verbose)

    commands = {
        "extract-profile": cmd_extract_profile,
        "screen": cmd_screen,
        "presets": cmd_presets,
    }
    try:
        commands[args.command](args)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

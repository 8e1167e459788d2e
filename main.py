import argparse
import datetime
import logging
import os
import sys

from core.app_context import AppContext
from core.config_loader import load_config
from core.exceptions import ReferralScoutError
from database.database import configure_database, init_db
from database.models import AvailabilityStatus, ReferralStatus

logger = logging.getLogger(__name__)


def _read_file(path: str) -> bytes:
    with open(path, 'rb') as f:
        return f.read()


def cmd_init_db(ctx: AppContext, args) -> int:
    init_db()
    return 0


def cmd_ingest(ctx: AppContext, args) -> int:
    requisition = ctx.requisition_service.ingest(
        manager_id=args.manager_id,
        title=args.title,
        client_name=args.client,
        filename=os.path.basename(args.file),
        data=_read_file(args.file)
    )
    print(f"Requisition {requisition.id} created: {requisition.title}")

    # Hand the committed trigger to the orchestrator; close() waits for the run
    ctx.events.drain()
    return 0


def cmd_match(ctx: AppContext, args) -> int:
    exit_code = 0
    for requisition_id in args.requisition_ids:
        result = ctx.orchestrator.run(requisition_id)
        print(
            f"Requisition {requisition_id}: {result.stage.value} "
            f"(required {result.required_experience} yrs, {result.written_count} written, "
            f"{result.skipped_count} skipped, {result.failed_count} failed)"
        )
        if not result.success:
            exit_code = 1
    return exit_code


def cmd_close(ctx: AppContext, args) -> int:
    requisition = ctx.requisition_service.close(args.requisition_id)
    print(f"Requisition {requisition.id} is now {requisition.status.value}")
    return 0


def cmd_recommendations(ctx: AppContext, args) -> int:
    views = ctx.requisition_service.recommendations(args.requisition_id)
    if not views:
        print(f"No recommendations yet for requisition {args.requisition_id}")
        return 0

    for view in views:
        skills = ", ".join(view.matching_skills) or "-"
        print(f"[{view.referral_id}] {view.match_score:3d}  {view.candidate_name}  {view.status.value}  ({skills})")
        if view.justification:
            print(f"      {view.justification}")
    return 0


def cmd_decide(ctx: AppContext, args) -> int:
    decision = ctx.requisition_service.decide(args.referral_id, args.status)
    print(
        f"Referral {decision.referral_id}: {decision.previous_status.value} -> {decision.status.value}; "
        f"candidate {decision.candidate_id} is {decision.candidate_availability.value}"
    )
    return 0


def cmd_engaged(ctx: AppContext, args) -> int:
    for view in ctx.requisition_service.engaged_candidates():
        job = f"{view.requisition_title} @ {view.client_name}" if view.requisition_id else "-"
        print(f"{view.candidate_id}  {view.full_name}  {view.availability.value}  {job}")
    return 0


def cmd_add_candidate(ctx: AppContext, args) -> int:
    profile = ctx.candidate_service.create(
        full_name=args.name,
        years_of_experience=args.years,
        availability=AvailabilityStatus(args.availability),
        expected_availability_date=args.available_from,
        job_level=args.job_level,
        current_role=args.role,
    )
    print(f"Candidate {profile.id} created: {profile.full_name}")
    return 0


def cmd_upload_resume(ctx: AppContext, args) -> int:
    ctx.candidate_service.background = False
    path = ctx.candidate_service.upload_resume(
        args.candidate_id,
        os.path.basename(args.file),
        _read_file(args.file)
    )
    profile = ctx.candidate_service.get_profile(args.candidate_id)
    print(f"Resume stored at {path}; skills: {', '.join(profile.skills) or '-'}")
    return 0


def _date(value: str):
    try:
        return datetime.date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected YYYY-MM-DD, got {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="ReferralScout Main Driver")
    parser.add_argument('--config', default='config.yaml', help='Path to config.yaml')
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('init-db', help='Create database tables')
    p.set_defaults(func=cmd_init_db)

    p = sub.add_parser('ingest', help='Upload a requisition document and run matching')
    p.add_argument('file')
    p.add_argument('--title', required=True)
    p.add_argument('--client')
    p.add_argument('--manager-id', type=int, required=True)
    p.set_defaults(func=cmd_ingest)

    p = sub.add_parser('match', help='Re-run matching for existing requisitions')
    p.add_argument('requisition_ids', type=int, nargs='+')
    p.set_defaults(func=cmd_match)

    p = sub.add_parser('close', help='Close a requisition')
    p.add_argument('requisition_id', type=int)
    p.set_defaults(func=cmd_close)

    p = sub.add_parser('recommendations', help='List referrals for a requisition, best first')
    p.add_argument('requisition_id', type=int)
    p.set_defaults(func=cmd_recommendations)

    p = sub.add_parser('decide', help='Apply a reviewer decision to a referral')
    p.add_argument('referral_id', type=int)
    p.add_argument('status', choices=[
        ReferralStatus.SELECTED.value, ReferralStatus.RESERVED.value, ReferralStatus.REJECTED.value
    ])
    p.set_defaults(func=cmd_decide)

    p = sub.add_parser('engaged', help='List ON_PROJECT and RESERVED candidates')
    p.set_defaults(func=cmd_engaged)

    p = sub.add_parser('add-candidate', help='Create a candidate profile')
    p.add_argument('name')
    p.add_argument('--years', type=int)
    p.add_argument('--availability', choices=[s.value for s in AvailabilityStatus],
                   default=AvailabilityStatus.AVAILABLE.value)
    p.add_argument('--available-from', type=_date, help='Expected availability date when ON_PROJECT')
    p.add_argument('--job-level')
    p.add_argument('--role')
    p.set_defaults(func=cmd_add_candidate)

    p = sub.add_parser('upload-resume', help='Attach a resume to a candidate and extract skills')
    p.add_argument('candidate_id', type=int)
    p.add_argument('file')
    p.set_defaults(func=cmd_upload_resume)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config(args.config)

    logging.basicConfig(
        level=getattr(logging, config.logging.level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    configure_database(config.database.url)
    ctx = AppContext.build(config)
    logger.info(f"Main driver running '{args.command}'")

    try:
        return args.func(ctx, args)
    except (ReferralScoutError, ValueError, OSError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1
    finally:
        ctx.close()


if __name__ == "__main__":
    sys.exit(main())

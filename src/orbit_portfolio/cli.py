from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Optional

from pydantic import ValidationError

from .board.events import BoardEvent, EventChannel
from .config import (
    get_log_level,
    get_workload_config,
    load_dashboard_config,
    resolve_state_dir,
    seed_users_enabled,
)
from .constants import FILTER_ALL
from .domain.models import Priority, ProjectHealth, ProjectStatus, TaskStatus
from .domain.seed import DEFAULT_USERS, sample_projects
from .errors import DashboardError, TransitionRejected
from .gateway.file_gateway import FileGateway
from .gateway.records import ProjectDraft
from .logging_utils import configure_logging
from .portfolio.aggregator import portfolio_condition, task_breakdown
from .workspace import Workspace, load_workspace


def _emit(payload: Any) -> None:
    sys.stdout.write(json.dumps(payload, indent=2) + '\n')


def _ctx(args: argparse.Namespace) -> tuple[FileGateway, dict[str, Any]]:
    state_dir = resolve_state_dir(args.state_dir)
    config, err = load_dashboard_config(state_dir)
    configure_logging(args.log_level or get_log_level(config))
    if err:
        sys.stderr.write(f"Ignoring unreadable config: {err}\n")
    return FileGateway(state_dir), config


def _workspace(gateway: FileGateway, config: dict[str, Any]) -> Workspace:
    return asyncio.run(load_workspace(gateway, seed_users=seed_users_enabled(config)))


def _seed(args: argparse.Namespace) -> int:
    gateway, _ = _ctx(args)
    if not gateway.is_empty() and not args.force:
        sys.stderr.write(f"Store at {gateway.state_dir} is not empty (use --force to overwrite)\n")
        return 1
    projects = sample_projects()
    gateway.seed(projects, DEFAULT_USERS)
    _emit({'state_dir': str(gateway.state_dir), 'projects': len(projects), 'users': len(DEFAULT_USERS)})
    return 0


def _stats(args: argparse.Namespace) -> int:
    gateway, config = _ctx(args)
    ws = _workspace(gateway, config)
    _emit({
        'stats': ws.stats().to_dict(),
        'condition': portfolio_condition(ws.projects),
        'errors': ws.errors,
    })
    return 0


def _projects(args: argparse.Namespace) -> int:
    gateway, config = _ctx(args)
    ws = _workspace(gateway, config)
    projects = ws.filtered(args.search, args.health, args.status)
    _emit({
        'projects': [
            {**{k: v for k, v in p.to_dict().items() if k != 'tasks'}, 'tasks': task_breakdown(p).to_dict()}
            for p in projects
        ],
    })
    return 0


def _workload(args: argparse.Namespace) -> int:
    gateway, config = _ctx(args)
    ws = _workspace(gateway, config)
    entries = ws.workload(**get_workload_config(config))
    _emit({'workload': [{'user': user.to_dict(), **load.to_dict()} for user, load in entries]})
    return 0


def _board(args: argparse.Namespace) -> int:
    gateway, config = _ctx(args)
    ws = _workspace(gateway, config)
    try:
        board = ws.board(args.project_id)
    except DashboardError as exc:
        sys.stderr.write(str(exc) + '\n')
        return 1
    columns = {status.value: [t.to_dict() for t in tasks] for status, tasks in board.columns().items()}
    _emit({'project_id': args.project_id, 'columns': columns})
    return 0


async def _run_move(args: argparse.Namespace, ws: Workspace) -> tuple[int, Optional[dict[str, Any]]]:
    channel = EventChannel()
    failures: list[BoardEvent] = []
    channel.subscribe(lambda event: failures.append(event) if event.is_failure else None)
    board = ws.board(args.project_id, channel)
    try:
        ok = await board.request_transition(args.task_id, args.status, timeout=args.timeout)
    except TransitionRejected as exc:
        sys.stderr.write(str(exc) + '\n')
        return 1, None
    if not ok:
        notice = failures[-1] if failures else None
        sys.stderr.write((notice.message if notice else 'Task update failed') + '\n')
        return 1, None
    task = board.get(args.task_id)
    return 0, task.to_dict() if task else None


def _move(args: argparse.Namespace) -> int:
    gateway, config = _ctx(args)
    ws = _workspace(gateway, config)
    try:
        rc, task = asyncio.run(_run_move(args, ws))
    except DashboardError as exc:
        sys.stderr.write(str(exc) + '\n')
        return 1
    if rc == 0:
        _emit({'task': task})
    return rc


def _project_create(args: argparse.Namespace) -> int:
    gateway, config = _ctx(args)
    ws = _workspace(gateway, config)
    try:
        draft = ProjectDraft(
            name=args.name,
            description=args.description,
            priority=Priority(args.priority),
            owner_id=args.owner,
            members=args.member or ([args.owner] if args.owner else []),
        )
    except ValidationError as exc:
        sys.stderr.write(f"Invalid project: {exc.errors()[0]['msg']}\n")
        return 1
    try:
        project = asyncio.run(ws.create_project(draft))
    except DashboardError as exc:
        sys.stderr.write(str(exc) + '\n')
        return 1
    _emit({'project': project.to_dict()})
    return 0


def _project_delete(args: argparse.Namespace) -> int:
    gateway, config = _ctx(args)
    ws = _workspace(gateway, config)
    deleted = asyncio.run(ws.delete_project(args.project_id))
    _emit({'deleted': deleted, 'project_id': args.project_id})
    return 0 if deleted else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Orbit portfolio dashboard core CLI')
    parser.add_argument('--state-dir', default=None, help='State directory (default: $ORBIT_STATE_DIR or ./.orbit)')
    parser.add_argument('--log-level', default=None, help='Log level (default: from config, else INFO)')
    subparsers = parser.add_subparsers(dest='command', required=True)

    seed = subparsers.add_parser('seed', help='Write the sample portfolio to an empty store')
    seed.add_argument('--force', action='store_true')
    seed.set_defaults(func=_seed)

    stats = subparsers.add_parser('stats', help='Show portfolio statistics')
    stats.set_defaults(func=_stats)

    projects = subparsers.add_parser('projects', help='List projects matching filters')
    projects.add_argument('--search', default='')
    projects.add_argument('--health', default=FILTER_ALL, choices=[FILTER_ALL] + [h.value for h in ProjectHealth])
    projects.add_argument('--status', default=FILTER_ALL, choices=[FILTER_ALL] + [s.value for s in ProjectStatus])
    projects.set_defaults(func=_projects)

    workload = subparsers.add_parser('workload', help='Show team workload against capacity')
    workload.set_defaults(func=_workload)

    board = subparsers.add_parser('board', help="Show a project's tasks grouped by status")
    board.add_argument('project_id')
    board.set_defaults(func=_board)

    move = subparsers.add_parser('move', help='Move a task to another status')
    move.add_argument('project_id')
    move.add_argument('task_id')
    move.add_argument('status', choices=[s.value for s in TaskStatus])
    move.add_argument('--timeout', type=float, default=None, help='Seconds to wait for the store')
    move.set_defaults(func=_move)

    project = subparsers.add_parser('project', help='Create or delete projects')
    project_sub = project.add_subparsers(dest='project_cmd', required=True)
    pcreate = project_sub.add_parser('create', help='Create a project')
    pcreate.add_argument('name')
    pcreate.add_argument('--description', default='')
    pcreate.add_argument('--priority', default=Priority.MEDIUM.value, choices=[p.value for p in Priority])
    pcreate.add_argument('--owner', default='')
    pcreate.add_argument('--member', action='append', default=None)
    pcreate.set_defaults(func=_project_create)
    pdelete = project_sub.add_parser('delete', help='Delete a project by ID')
    pdelete.add_argument('project_id')
    pdelete.set_defaults(func=_project_delete)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    handler = getattr(args, 'func', None)
    if handler is None:
        parser.print_help()
        return 1
    return int(handler(args) or 0)


if __name__ == '__main__':
    raise SystemExit(main())

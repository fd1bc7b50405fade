from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .activities.mysql_activity_repository import MySQLActivityRepository
from .activities.repository import ActivityRepository
from .activities.service import ActivityService
from .attendance.mysql_attendance_repository import MySQLTimeLogRepository
from .attendance.repository import TimeLogRepository
from .attendance.rollover import MidnightRollover
from .attendance.service import AttendanceService
from .common.datetime_utils import now_local
from .core.constants import DEFAULT_HISTORY_DAYS, REPORT_LOG_LIMIT
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import AdminAggregationService
from .requests.factory import RequestHandlerFactory
from .requests.mysql_request_repository import MySQLRequestRepository
from .requests.repository import RequestRepository
from .requests.service import RequestService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import SchedulePlanner
from .users.identity import IdentityGateway
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import SessionResolver, UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    time_logs_repo: TimeLogRepository
    requests_repo: RequestRepository
    schedules_repo: ScheduleRepository
    activities_repo: ActivityRepository

    identity_gateway: IdentityGateway
    session_resolver: SessionResolver
    user_service: UserService
    activity_service: ActivityService
    schedule_planner: SchedulePlanner
    attendance_service: AttendanceService
    request_service: RequestService
    aggregation_service: AdminAggregationService
    rollover: MidnightRollover


def assemble(
    *,
    users_repo: UserRepository,
    time_logs_repo: TimeLogRepository,
    requests_repo: RequestRepository,
    schedules_repo: ScheduleRepository,
    activities_repo: ActivityRepository,
    conn: Optional[DatabaseConnection] = None,
    history_days: int = DEFAULT_HISTORY_DAYS,
    report_log_limit: int = REPORT_LOG_LIMIT,
    clock=now_local,
) -> Container:
    """Wire the services over any set of repositories."""

    identity_gateway = IdentityGateway(users_repo, clock=clock)
    session_resolver = SessionResolver(users_repo, identity_gateway)
    user_service = UserService(users_repo, identity_gateway, clock=clock)
    activity_service = ActivityService(activities_repo, requests_repo, clock=clock)
    schedule_planner = SchedulePlanner(schedules_repo, users_repo, clock=clock)
    attendance_service = AttendanceService(
        time_logs_repo,
        requests_repo,
        schedule_planner,
        activity_service,
        clock=clock,
        history_days=history_days,
    )
    handlers = RequestHandlerFactory(time_logs_repo, attendance_service, requests_repo).build_all()
    request_service = RequestService(requests_repo, handlers, activity_service, attendance_service, clock=clock)
    aggregation_service = AdminAggregationService(
        requests_repo, users_repo, time_logs_repo, log_limit=report_log_limit
    )
    rollover = MidnightRollover(attendance_service.reset_day, clock=clock)

    return Container(
        conn=conn,
        users_repo=users_repo,
        time_logs_repo=time_logs_repo,
        requests_repo=requests_repo,
        schedules_repo=schedules_repo,
        activities_repo=activities_repo,
        identity_gateway=identity_gateway,
        session_resolver=session_resolver,
        user_service=user_service,
        activity_service=activity_service,
        schedule_planner=schedule_planner,
        attendance_service=attendance_service,
        request_service=request_service,
        aggregation_service=aggregation_service,
        rollover=rollover,
    )


def build_container(
    *,
    db_config: dict,
    history_days: int = DEFAULT_HISTORY_DAYS,
    report_log_limit: int = REPORT_LOG_LIMIT,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return assemble(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        time_logs_repo=MySQLTimeLogRepository(conn),
        requests_repo=MySQLRequestRepository(conn),
        schedules_repo=MySQLScheduleRepository(conn),
        activities_repo=MySQLActivityRepository(conn),
        history_days=history_days,
        report_log_limit=report_log_limit,
    )

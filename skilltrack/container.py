"""Manual wiring of repositories, domain services and use cases."""

import logging
from dataclasses import dataclass
from typing import Optional

from .config import Settings
from .database import create_db_and_tables, get_engine
from .repositories import (
    InMemorySkillRepository,
    InMemoryTaskRepository,
    InMemoryUserRepository,
    SkillRepository,
    SqlSkillRepository,
    SqlTaskRepository,
    SqlUserRepository,
    TaskRepository,
    UserRepository,
)
from .services.auth import GetMe, LoginUser, LogoutUser, RefreshSession, RegisterUser
from .services.session import PasswordHasher, TokenProvider
from .services.skills import CreateSkill, DeleteSkill, ListSkills, UpdateSkill
from .services.task_domain import TaskDomainService
from .services.tasks import CreateTask, DeleteTask, ListTasks, UpdateTask
from .services.token_store import TokenStore
from .services.user_domain import UserDomainService

logger = logging.getLogger(__name__)


@dataclass
class AuthContainer:
    register: RegisterUser
    login: LoginUser
    refresh: RefreshSession
    get_me: GetMe
    logout: LogoutUser
    tokens: TokenProvider
    settings: Settings
    token_store: Optional[TokenStore] = None
    engine: Optional[object] = None


@dataclass
class TaskContainer:
    create_task: CreateTask
    update_task: UpdateTask
    delete_task: DeleteTask
    list_tasks: ListTasks
    create_skill: CreateSkill
    update_skill: UpdateSkill
    delete_skill: DeleteSkill
    list_skills: ListSkills
    token_store: Optional[TokenStore] = None
    engine: Optional[object] = None


def build_auth_container(
    settings: Settings,
    users: UserRepository,
    token_store: Optional[TokenStore] = None,
    engine=None,
) -> AuthContainer:
    tokens = TokenProvider(
        settings.auth_secret,
        access_ttl_seconds=settings.access_token_ttl_seconds,
        refresh_ttl_seconds=settings.refresh_token_ttl_seconds,
    )
    hasher = PasswordHasher()
    return AuthContainer(
        register=RegisterUser(users, UserDomainService(), hasher, tokens, token_store),
        login=LoginUser(users, hasher, tokens, token_store),
        refresh=RefreshSession(users, tokens, token_store),
        get_me=GetMe(users),
        logout=LogoutUser(users, token_store),
        tokens=tokens,
        settings=settings,
        token_store=token_store,
        engine=engine,
    )


def build_task_container(
    tasks: TaskRepository,
    skills: SkillRepository,
    token_store: Optional[TokenStore] = None,
    engine=None,
) -> TaskContainer:
    domain = TaskDomainService()
    return TaskContainer(
        create_task=CreateTask(tasks, domain, skills),
        update_task=UpdateTask(tasks, domain, skills),
        delete_task=DeleteTask(tasks, skills),
        list_tasks=ListTasks(tasks),
        create_skill=CreateSkill(skills),
        update_skill=UpdateSkill(skills),
        delete_skill=DeleteSkill(skills, tasks),
        list_skills=ListSkills(skills),
        token_store=token_store,
        engine=engine,
    )


def connect_token_store(settings: Settings) -> Optional[TokenStore]:
    if not settings.token_store_enabled:
        logger.info("Token store disabled")
        return None
    return TokenStore.connect(
        settings.redis_url,
        settings.access_token_ttl_seconds,
        settings.refresh_token_ttl_seconds,
    )


def _open_engine(settings: Settings):
    engine = get_engine(settings.database_url, echo=settings.sql_echo)
    create_db_and_tables(engine)
    return engine


def auth_container_from_settings(settings: Settings) -> AuthContainer:
    token_store = connect_token_store(settings)
    if settings.repository_backend == "memory":
        return build_auth_container(settings, InMemoryUserRepository(), token_store)
    engine = _open_engine(settings)
    return build_auth_container(settings, SqlUserRepository(engine), token_store, engine)


def task_container_from_settings(settings: Settings) -> TaskContainer:
    token_store = connect_token_store(settings)
    if settings.repository_backend == "memory":
        return build_task_container(InMemoryTaskRepository(), InMemorySkillRepository(), token_store)
    engine = _open_engine(settings)
    return build_task_container(SqlTaskRepository(engine), SqlSkillRepository(engine), token_store, engine)


def close_container(container) -> None:
    """Release connections opened by ``*_container_from_settings``."""
    if container.token_store is not None:
        container.token_store.close()
    if container.engine is not None:
        container.engine.dispose()

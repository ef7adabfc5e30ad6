"""
Canvas MCP Account Tools

This module contains account administration tools: account details,
account-wide course and user listings, user creation, sub-accounts and
reports.
"""

import logging
from typing import Any, Literal

from mcp.server.fastmcp import Context, FastMCP

from canvas_mcp_server.utils.context import run_accessor

from canvas_mcp_server.utils.validation import require_fields

logger = logging.getLogger(__name__)


def register_account_tools(mcp: FastMCP) -> None:
    """Register account tools with the MCP server."""

    @mcp.tool()
    async def canvas_get_account(ctx: Context, account_id: int) -> dict[str, Any]:
        """Get account details."""
        require_fields(account_id=account_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.get_account, account_id)

    @mcp.tool()
    async def canvas_list_account_courses(
        ctx: Context,
        account_id: int,
        with_enrollments: bool | None = None,
        published: bool | None = None,
        completed: bool | None = None,
        search_term: str | None = None,
        sort: Literal[
            "course_name", "sis_course_id", "teacher", "account_name"
        ] | None = None,
        order: Literal["asc", "desc"] | None = None,
    ) -> list[dict[str, Any]]:
        """
        List courses for an account.

        Args:
            ctx: Request context containing resources
            account_id: ID of the account
            with_enrollments: Include only courses with enrollments
            published: Include only published courses
            completed: Include only completed courses
            search_term: Search term to filter courses
            sort: Sort field
            order: Sort order

        Returns:
            List of courses
        """
        require_fields(account_id=account_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(
            ctx,
            api_adapter.list_account_courses,
            account_id,
            with_enrollments=with_enrollments,
            published=published,
            completed=completed,
            search_term=search_term,
            sort=sort,
            order=order,
        )

    @mcp.tool()
    async def canvas_list_account_users(
        ctx: Context,
        account_id: int,
        search_term: str | None = None,
        sort: Literal["username", "email", "sis_id", "last_login"] | None = None,
        order: Literal["asc", "desc"] | None = None,
    ) -> list[dict[str, Any]]:
        """
        List users for an account.

        Args:
            ctx: Request context containing resources
            account_id: ID of the account
            search_term: Search term to filter users
            sort: Sort field
            order: Sort order

        Returns:
            List of users
        """
        require_fields(account_id=account_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(
            ctx,
            api_adapter.list_account_users,
            account_id,
            search_term=search_term,
            sort=sort,
            order=order,
        )

    @mcp.tool()
    async def canvas_create_user(
        ctx: Context,
        account_id: int,
        user: dict[str, Any],
        pseudonym: dict[str, Any],
    ) -> dict[str, Any]:
        """
        Create a new user in an account.

        Args:
            ctx: Request context containing resources
            account_id: ID of the account
            user: User attributes (name, short_name, sortable_name, time_zone, ...)
            pseudonym: Login attributes (unique_id, password, sis_user_id, send_confirmation, ...)

        Returns:
            The created user
        """
        require_fields(account_id=account_id, user=user, pseudonym=pseudonym)
        if not user.get("name"):
            raise ValueError("Missing required field: user.name")
        if not pseudonym.get("unique_id"):
            raise ValueError("Missing required field: pseudonym.unique_id")

        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        created = await run_accessor(ctx, api_adapter.create_user, account_id, user, pseudonym)
        logger.info(f"Created user {created.get('id')} in account {account_id}")
        return created

    @mcp.tool()
    async def canvas_list_sub_accounts(ctx: Context, account_id: int) -> list[dict[str, Any]]:
        """List sub-accounts of an account."""
        require_fields(account_id=account_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.list_sub_accounts, account_id)

    @mcp.tool()
    async def canvas_get_account_reports(ctx: Context, account_id: int) -> list[dict[str, Any]]:
        """List the reports available for an account."""
        require_fields(account_id=account_id)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(ctx, api_adapter.get_account_reports, account_id)

    @mcp.tool()
    async def canvas_create_account_report(
        ctx: Context,
        account_id: int,
        report: str,
        parameters: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Start generating an account report.

        Args:
            ctx: Request context containing resources
            account_id: ID of the account
            report: Report type, e.g. provisioning_csv
            parameters: Report parameters

        Returns:
            The report status record
        """
        require_fields(account_id=account_id, report=report)
        api_adapter = ctx.request_context.lifespan_context["api_adapter"]
        return await run_accessor(
            ctx, api_adapter.create_account_report, account_id, report, parameters
        )

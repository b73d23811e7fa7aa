# src/campus_feed/scripts/cli.py
"""
Command-line front end for the campus feed store.

Every invocation opens the configured storage, restores the resident user and
posts, runs one command and flushes pending writes before exiting:

    campus-feed signup alice alice@example.com secret1
    campus-feed post --org "Chess Club" --heading "Meetup" --body "Room 4"
    campus-feed feed
"""

from __future__ import annotations

import argparse
import asyncio
from collections.abc import Sequence
from datetime import date, datetime

from campus_feed.core.errors import ValidationError
from campus_feed.core.logging_config import configure_logging
from campus_feed.core.settings import Settings
from campus_feed.core.time import utcnow
from campus_feed.schemas.post import Post
from campus_feed.schemas.result import StoreResult
from campus_feed.services.auth import AuthService
from campus_feed.services.bootstrap import open_store
from campus_feed.services.event_calendar import event_label, events_on, marked_dates
from campus_feed.services.ordering import order_by_recency
from campus_feed.services.post_service import build_comment, build_post
from campus_feed.services.rewards import affordable_rewards
from campus_feed.services.store import EntityStore


def _report(result: StoreResult, message: str) -> int:
    if result.ok:
        print(message)
        return 0
    print(f"Error: {result.error.message}")
    return 1


def _format_post(post: Post) -> str:
    when = post.created_at.strftime("%Y-%m-%d %H:%M")
    line = f"[{post.id}] {post.heading} ({post.organization}, by {post.author}, {when})"
    if post.is_event and post.event_date is not None:
        line += f" event on {post.event_date.date().isoformat()}"
    return f"{line}  likes={post.likes} comments={len(post.comments)}"


async def _dispatch(args: argparse.Namespace, store: EntityStore, auth: AuthService) -> int:
    command = args.command
    user = store.current_user

    if command == "signup":
        result = await auth.signup(args.username, args.email, args.password)
        return _report(result, "Signup successful!")
    if command == "login":
        result = await auth.login(args.identifier, args.password)
        return _report(result, "Login successful!")
    if command == "logout":
        return _report(await auth.logout(), "Logged out.")
    if command == "reset":
        return _report(await auth.reset_storage(), "Storage cleared.")

    if command == "whoami":
        if user is None:
            print("Not signed in.")
            return 1
        print(f"{user.username} <{user.email}> points={user.reward_points}")
        return 0

    if command == "post":
        try:
            post = build_post(
                author=user,
                organization=args.org,
                heading=args.heading,
                body=args.body,
                is_event=args.event_date is not None,
                event_date=args.event_date,
            )
        except ValidationError as exc:
            print(f"Error: {exc.message}")
            return 1
        return _report(store.add_post(post), f"Created post {post.id}")

    if command == "feed":
        for post in order_by_recency(store.posts):
            print(_format_post(post))
        return 0

    if command == "like":
        return _report(store.like_post(args.post_id), "Liked.")
    if command == "unlike":
        return _report(store.unlike_post(args.post_id), "Unliked.")

    if command == "comment":
        try:
            comment = build_comment(author=user, content=args.content)
        except ValidationError as exc:
            print(f"Error: {exc.message}")
            return 1
        return _report(store.add_comment(args.post_id, comment), f"Added comment {comment.id}")

    if command == "events":
        day = args.date or utcnow().date()
        print(f"{event_label(day)} on {day.isoformat()}:")
        for post in events_on(store.posts, day):
            print(_format_post(post))
        upcoming = sorted(d for d in marked_dates(store.posts) if d > day)
        if upcoming:
            print("Other event days: " + ", ".join(d.isoformat() for d in upcoming))
        return 0

    if command == "rewards":
        balance = user.reward_points if user is not None else 0
        print(f"Your Points: {balance}")
        affordable = {reward.id for reward in affordable_rewards(user, store.rewards)}
        for reward in store.rewards:
            marker = "*" if reward.id in affordable else " "
            print(f"{marker} {reward.name}: {reward.cost} Points")
        return 0

    raise ValueError(f"Unknown command: {command}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="campus-feed", description=__doc__.splitlines()[1])
    parser.add_argument("--storage", help="Path of the JSON storage file")
    parser.add_argument("--log-level", help="Logging level (default from LOG_LEVEL)")
    sub = parser.add_subparsers(dest="command", required=True)

    signup = sub.add_parser("signup", help="Register and sign in")
    signup.add_argument("username")
    signup.add_argument("email")
    signup.add_argument("password")

    login = sub.add_parser("login", help="Sign in with username or email")
    login.add_argument("identifier")
    login.add_argument("password")

    sub.add_parser("logout", help="Sign out")
    sub.add_parser("whoami", help="Show the signed-in user")
    sub.add_parser("reset", help="Erase all stored data")

    post = sub.add_parser("post", help="Publish a post")
    post.add_argument("--org", required=True)
    post.add_argument("--heading", required=True)
    post.add_argument("--body", required=True)
    post.add_argument(
        "--event-date",
        type=datetime.fromisoformat,
        help="ISO date/time; marks the post as an event",
    )

    sub.add_parser("feed", help="List posts, newest first")

    like = sub.add_parser("like", help="Like a post")
    like.add_argument("post_id")
    unlike = sub.add_parser("unlike", help="Remove a like")
    unlike.add_argument("post_id")

    comment = sub.add_parser("comment", help="Comment on a post")
    comment.add_argument("post_id")
    comment.add_argument("content")

    events = sub.add_parser("events", help="List events for a day")
    events.add_argument("--date", type=date.fromisoformat)

    sub.add_parser("rewards", help="Show the reward catalog")
    return parser


async def run(args: argparse.Namespace, config: Settings) -> int:
    async with open_store(config) as store:
        auth = AuthService(store, config=config)
        return await _dispatch(args, store, auth)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = Settings()
    if args.storage:
        config.storage_backend = "file"
        config.storage_path = args.storage
    configure_logging(args.log_level or config.log_level)
    return asyncio.run(run(args, config))


if __name__ == "__main__":
    raise SystemExit(main())

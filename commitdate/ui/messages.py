"""Warning texts and commit labels for terminal output."""

from __future__ import annotations

import click

from commitdate.models.commit import Commit
from commitdate.services.date_validator import format_date


class MessageFormatter:
    """Builds the human-facing warnings shown around pushed commits."""

    def __init__(self, color: bool = True) -> None:
        self.color = color

    def style(self, text: str, **styles) -> str:
        return click.style(text, **styles) if self.color else text

    def initial_warning(self) -> str:
        return "\n".join([
            "",
            f"{self.style('WARNING:', fg='yellow', bold=True)} Pushed commit mode",
            "",
            "Changing pushed commits:",
            "- Rewrites Git history",
            "- Requires force push",
            "- Can break other developers' work",
            "- Can cause conflicts on pull",
            "",
            "Only use this if:",
            f"{self.style('+', fg='green')} You are working on a personal branch",
            f"{self.style('+', fg='green')} Nobody else uses this branch",
            f"{self.style('+', fg='green')} You understand the consequences of force push",
            "",
        ])

    def commit_warning(self, commit: Commit) -> str:
        return "\n".join([
            "",
            f"{self.style('DANGER:', fg='red', bold=True)} This commit is ALREADY PUSHED",
            "",
            f'Commit: {self.style(commit.short_id, fg="cyan")} "{commit.message}"',
            f"Pushed to: {self.style(', '.join(commit.remote_refs), fg='yellow')}",
            "",
            "Changing it will REQUIRE:",
            f"{self.style('*', fg='yellow')} git push --force-with-lease",
            "",
        ])

    def final_warning(self, commit: Commit) -> str:
        return "\n".join([
            "",
            self.style("After the change you will need to run:", fg="yellow"),
            f"   {self.force_push_command(commit)}",
            "",
        ])

    def post_change_instructions(self, commit: Commit) -> str:
        return "\n".join([
            "",
            f"{self.style('IMPORTANT:', fg='yellow', bold=True)} "
            "The commit was pushed. To synchronize, run:",
            "",
            f"   {self.style(self.force_push_command(commit), fg='cyan')}",
            "",
            self.style("Warn your team about the force push!", fg="yellow"),
            "",
        ])

    @staticmethod
    def force_push_command(commit: Commit) -> str:
        target = commit.remote_refs[0] if commit.remote_refs else "origin <branch>"
        remote, _, branch = target.partition("/")
        if branch:
            target = f"{remote} {branch}"
        return f"git push --force-with-lease {target}"

    def commit_label(self, commit: Commit) -> str:
        marker = self.style("[pushed] ", fg="yellow") if commit.is_pushed else ""
        date = format_date(commit.author_date)[:16].replace("T", " ")
        return (
            f"{marker}{self.style(commit.short_id, fg='cyan')} "
            f"({self.style(date, fg='bright_black')}) {commit.message}"
        )

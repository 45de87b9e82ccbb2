"""
Help system - centralized help registration and display.

Each module registers its help information here; the bot renders it as
embeds when asked for help.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import discord

EMBED_COLOR = 0x5865F2
FIELD_LIMIT = 1024


@dataclass
class ModuleHelp:
    """Help information for a single module."""

    name: str
    description: str
    help_command: str = ""  # Command to run for detailed help (e.g., "react help")
    commands: list[tuple[str, str]] = field(default_factory=list)
    # (command, description) tuples

    def command_lines(self) -> list[str]:
        return [f"**`{cmd}`** - {desc}" for cmd, desc in self.commands]

    def to_detailed_embed(self) -> discord.Embed:
        """Create a detailed embed for this module with all commands."""
        embed = discord.Embed(
            title=self.name,
            description=self.description,
            color=EMBED_COLOR,
        )

        chunks: list[str] = []
        current: list[str] = []
        current_len = 0
        for line in self.command_lines():
            line_len = len(line) + (1 if current else 0)
            if current and current_len + line_len > FIELD_LIMIT:
                chunks.append("\n".join(current))
                current = [line]
                current_len = len(line)
            else:
                current.append(line)
                current_len += line_len
        if current:
            chunks.append("\n".join(current))

        for index, chunk in enumerate(chunks, start=1):
            field_name = "Commands" if index == 1 else f"Commands (cont. {index})"
            embed.add_field(name=field_name, value=chunk, inline=False)

        return embed


class HelpSystem:
    """Central help registry that modules register with on import."""

    def __init__(self) -> None:
        self._modules: dict[str, ModuleHelp] = {}

    def register_module(
        self,
        name: str,
        description: str,
        help_command: str = "",
        commands: Optional[list[tuple[str, str]]] = None,
    ) -> None:
        self._modules[name] = ModuleHelp(
            name=name,
            description=description,
            help_command=help_command,
            commands=commands or [],
        )

    def get_module_embed(self, name: str) -> Optional[discord.Embed]:
        module_help = self._modules.get(name)
        if module_help is None:
            return None
        return module_help.to_detailed_embed()


# Global instance
help_system = HelpSystem()

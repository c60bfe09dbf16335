# Model-based testing: command types, hypothesis generators and the command runner

from .commands import Command, COMMAND_TYPES, READ_ONLY_COMMANDS
from .generators import (
    account_strategy, known_account_strategy, crowdsale_config_strategy,
    command_strategies, command_strategy, command_sequence_strategy,
)
from .runner import CommandRunner, CommandOutcome

__all__ = [
    # Commands
    'Command', 'COMMAND_TYPES', 'READ_ONLY_COMMANDS',
    # Generators
    'account_strategy', 'known_account_strategy', 'crowdsale_config_strategy',
    'command_strategies', 'command_strategy', 'command_sequence_strategy',
    # Runner
    'CommandRunner', 'CommandOutcome',
]

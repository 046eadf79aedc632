import sys

from py_bankclient.presentation.cli.main import cli

sys.exit(cli())

import sys

from reactor_game.cli import main

sys.exit(main())

import sys

from vcenter_move.cli import main

sys.exit(main())

import sys

from btterminal.terminal import main

sys.exit(main())

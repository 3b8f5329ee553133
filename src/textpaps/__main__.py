import sys

from textpaps.cli import main

sys.exit(main())

import sys

from note_pages.cli import main

sys.exit(main())

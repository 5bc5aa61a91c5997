import sys

from tag_cleanup.cli import main

sys.exit(main())

import sys

from search_node.cli import main

sys.exit(main())

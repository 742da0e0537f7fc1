import sys

from capres.cli import main

sys.exit(main())

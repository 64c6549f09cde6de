import sys

from nethealth.cli import main

sys.exit(main())

import sys

from talentmatch.main import main

sys.exit(main())

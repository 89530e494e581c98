import sys

from govtex.main import main

sys.exit(main())

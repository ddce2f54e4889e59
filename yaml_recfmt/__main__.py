import sys

from yaml_recfmt.pipeline.main import main

sys.exit(main())

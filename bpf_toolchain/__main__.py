import sys

from bpf_toolchain.cli import main


sys.exit(main())

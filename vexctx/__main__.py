import sys

from vexctx.errors import VexCtxError
from vexctx.literals import read_literal
from vexctx.runner import run

USAGE = (
    "e.g., python -m vexctx -arch amd64 -file /some/file/path/init.py "
    "-ip 0x400000 -assign 'rax = SYM' '0x1000 = 5' ....."
)


def _parse_args(argv):
    i = 1
    arch, outfile, ip, assigns = None, None, None, []
    while i < len(argv):
        if argv[i] == "-arch":
            arch = argv[i+1]
        elif argv[i] == "-file":
            outfile = argv[i+1]
        elif argv[i] == "-ip":
            ip = read_literal(argv[i+1])
        elif argv[i] == "-decls":
            with open(argv[i+1]) as f:
                assigns.extend(f.read().splitlines())
        elif argv[i] == "-assign":
            assigns.extend(argv[i+1:])
            break
        else:
            raise SystemExit(f"unknown option {argv[i]}\n{USAGE}")

        i += 2

    if not (arch and outfile):
        print("please provide an architecture and an output file")
        print(USAGE)
        raise SystemExit(2)

    return arch, outfile, ip, assigns


def main(argv=None):
    argv = sys.argv if argv is None else argv
    try:
        archname, outfile, ip, lines = _parse_args(argv)
    except IndexError:
        print(f"missing value for {argv[-1]}")
        print(USAGE)
        return 2
    except (VexCtxError, OSError) as e:
        print(f"error: {e}")
        return 1
    try:
        ctx, rejected = run(archname, lines, outfile, ip)
    except (VexCtxError, OSError) as e:
        print(f"error: {e}")
        return 1
    for decl in rejected:
        print(f"rejected {decl.token!r}: {decl.reason}")
    print(f"wrote initial state of {len(ctx.regfile.registers)} registers to {outfile}")
    return 1 if rejected else 0


if __name__ == "__main__":
    sys.exit(main())

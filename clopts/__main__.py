"""
Program entry point: parse the command line and print the configuration.

    $ python -m clopts --nthreads 4 -s=1 -qp -l=false --input other_scene.txt
    Parsed options: {
        nthreads: 4,
        ...
    }

Any parse error is printed once to standard output and ends the process with
EXIT_STATUS.
"""
from rich.text import Text

from .faults import console
from .presets import render_parser


def main(argv=None):
    parser = render_parser(shell=True)
    config = parser.parse(argv) if argv is not None else parser.parse()
    console.print(Text.assemble("Parsed options: ", str(config)), soft_wrap=True)
    return 0


if __name__ == '__main__':
    raise SystemExit(main())

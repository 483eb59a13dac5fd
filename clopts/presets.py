"""
Ready-made option sets.

RENDER_OPTIONS is the option table of a small path-tracing renderer: thread
count, samples per pixel, random seed, output image, input scene, and three
boolean switches that can be clustered (-qlp).
"""
from .options import Option
from .parser import Parser
from .values import Kind

RENDER_OPTIONS = (
    Option("nthreads", "n", kind=Kind.INT, default=0, descr="number of worker threads"),
    Option("spp", kind=Kind.INT, default=0, descr="samples per pixel"),
    Option("seed", "s", kind=Kind.INT, default=0, descr="random seed"),
    Option("imagefile", kind=Kind.STRING, default="image.ppm", field="image_file", descr="output image path"),
    Option("input", "input_file", kind=Kind.STRING, default="scene.txt", field="input_file", descr="scene description path"),
    Option("quiet", "q", kind=Kind.BOOL, default=False, descr="suppress progress output"),
    Option("logutil", "l", kind=Kind.BOOL, default=False, field="log_util", descr="log thread utilization"),
    Option("partial", "p", kind=Kind.BOOL, default=False, descr="write partial images while rendering"),
)


def render_parser(**options):
    """
    Build a Parser over RENDER_OPTIONS; keyword options are forwarded to Parser.
    """
    return Parser(RENDER_OPTIONS, **options)


__all__ = (
    "RENDER_OPTIONS",
    "render_parser",
)

import fire

from glyphwarp.run import run


def main():
    """The main entry point for the command-line interface.

    Exposes `glyphwarp.run.run` on the command line through `fire`.
    """
    fire.Fire(run)


if __name__ == "__main__":
    main()

#!.venv/bin/python

# The shebang may point towards a venv, but CI executes python -m runtest

import os
import subprocess
import sys
import traceback
import unittest

from test.runtime import ResultAdapter, StyledStream


if __name__ == "__main__":
    stream = sys.stdout
    styled = StyledStream(stream)

    def println(s: str = "") -> None:
        if s:
            stream.write(s)
        stream.write("\n")
        stream.flush()

    println(styled.h1("1. Setup"))
    println(styled.h2("Python"))
    println(f"{sys.executable} {sys.version.split()[0]}")
    println(styled.h2("Current Directory"))
    println(f"{os.getcwd()}")
    println(styled.h2("Terminal"))
    output = styled.output
    println(f"TERM={os.environ.get('TERM', 'n/a')}")
    println(f"identity: {output.identity.value}")
    println(f"profile:  {output.profile.name}")

    println(styled.h1("2. Type Checking"))
    try:
        subprocess.run([sys.executable, "-m", "pyright"], check=True)
    except (subprocess.CalledProcessError, FileNotFoundError):
        println(styled.failure(" termtint failed to type check! "))
        sys.exit(1)

    println(styled.h1("3. Unit Testing"))
    try:
        runner = unittest.main(
            module=None,
            argv=[sys.argv[0], "discover", "-s", "test", "-t", "."],
            exit=False,
            testRunner=unittest.TextTestRunner(
                stream=stream, resultclass=ResultAdapter  # type: ignore[arg-type]
            ),
        )
        sys.exit(not runner.result.wasSuccessful())
    except Exception as x:
        trace = traceback.format_exception(x)
        println("".join(trace[:-1]))
        println(styled.err(trace[-1]))
        sys.exit(1)

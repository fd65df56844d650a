import logging
import subprocess

from btterminal.conduit.base import StreamConduit

logger = logging.getLogger(__name__)


class ProcessConduit(StreamConduit):
    """
    Runs a child process and talks to it over its standard streams: input reads the child's stdout,
    output writes to the child's stdin. The child's stderr is discarded.
    Raises OSError when the executable cannot be started.
    """

    # seconds to wait for a terminated child before killing it
    terminate_timeout = 2

    def __init__(self, *args, cwd=None):
        super().__init__()
        self.args = args
        self.process = subprocess.Popen(args, cwd=cwd, stdin=subprocess.PIPE, stdout=subprocess.PIPE,
                                        stderr=subprocess.DEVNULL)
        self.set_streams(self.process.stdout, self.process.stdin)

    @property
    def target(self):
        return self.process

    @property
    def open(self):
        return self.process is not None and self.process.poll() is None

    def close(self):
        process, self.process = self.process, None
        if process is None:
            return
        if process.poll() is None:
            process.terminate()
            try:
                process.wait(self.terminate_timeout)
            except subprocess.TimeoutExpired:
                logger.warning("%s did not exit, killing it" % self.args[0])
                process.kill()
                process.wait()
        try:
            if process.stdin is not None:
                process.stdin.close()
        finally:
            if process.stdout is not None:
                process.stdout.close()

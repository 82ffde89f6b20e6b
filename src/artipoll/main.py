from artipoll.cmd import poll as poll_cmd

app = poll_cmd.poll_app


def main():
    app()

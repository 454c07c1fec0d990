from switchyard import Cli

# Host hooks read by the help presenter and the fault renderer.
__prog__ = "switchyard"
__styles__ = {
    "banner": "bold #36C5F0",
    "code": "bold #FFD600",
}


if __name__ == '__main__':
    Cli(fancy=True).execute()

from .app import main

main(console_log=True)

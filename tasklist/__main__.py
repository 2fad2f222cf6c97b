from tasklist.ui.telegram.main import run

run()

from seed.main import run

run()

from matrix_receiver.main import run

run()

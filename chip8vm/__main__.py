from chip8vm.cli import main

main()

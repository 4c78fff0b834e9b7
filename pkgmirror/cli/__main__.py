from pkgmirror.cli import main

main()

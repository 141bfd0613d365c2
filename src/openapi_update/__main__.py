from openapi_update import main

main()

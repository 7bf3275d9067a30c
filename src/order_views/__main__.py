from order_views.runtime.processor import main

if __name__ == "__main__":
    main()

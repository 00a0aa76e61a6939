from .kernel import CalystoMARIE

if __name__ == '__main__':
    CalystoMARIE.run_as_main()

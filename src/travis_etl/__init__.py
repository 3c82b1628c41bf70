"""Travis CI 빌드 이력 수집 ETL."""

import os


class Config:
    """Base configuration"""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///draftroom.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Automation driver (timer expiry, phase advancement)
    AUTOMATION_ENABLED = True
    AUTOMATION_TICK_SECONDS = 1

    # Optimistic-concurrency retries per operation
    TRANSACTION_MAX_RETRIES = 5

    RATELIMIT_ENABLED = True


class DevelopmentConfig(Config):
    """Local development"""
    DEBUG = True


class TestingConfig(Config):
    """Test runs: in-memory database, no background scheduler"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    AUTOMATION_ENABLED = False
    RATELIMIT_ENABLED = False


class ProductionConfig(Config):
    """Production deployment"""
    DEBUG = False
    AUTOMATION_ENABLED = os.environ.get('AUTOMATION_ENABLED', '1') == '1'


config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig,
}

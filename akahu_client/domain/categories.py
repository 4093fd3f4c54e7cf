"""NZFCC (New Zealand Financial Category Codes) taxonomy used by Akahu enrichment

The taxonomy is governed outside Akahu and grows over time, so lookups never
fail: names missing from this table resolve to the UNKNOWN member while the
raw name is kept on the decoded entity.
"""

from enum import Enum


class PersonalFinanceGroup(str, Enum):
    APPEARANCE = "Appearance"
    EDUCATION = "Education"
    FOOD = "Food"
    HEALTH = "Health"
    HOUSEHOLD = "Household"
    HOUSING = "Housing"
    INCOME = "Income"
    LIFESTYLE = "Lifestyle"
    PROFESSIONAL_SERVICES = "Professional Services"
    TRANSFERS = "Transfers"
    TRANSPORT = "Transport"
    UTILITIES = "Utilities"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, name: str) -> "PersonalFinanceGroup":
        try:
            return cls(name)
        except ValueError:
            return cls.UNKNOWN


class NzfccCode(str, Enum):
    # Appearance
    CLOTHING_AND_ACCESSORIES = "Clothing and accessories"
    FOOTWEAR = "Footwear"
    HAIRDRESSERS_AND_BARBERS = "Hairdressers and barbers"
    BEAUTY_SALONS = "Beauty salons"
    COSMETICS_AND_BEAUTY_PRODUCTS = "Cosmetics and beauty products"
    JEWELLERY = "Jewellery"
    # Education
    CHILDCARE = "Childcare"
    SCHOOLS = "Schools"
    TERTIARY_EDUCATION = "Tertiary education"
    TRAINING_AND_COURSES = "Training and courses"
    BOOKS_AND_STATIONERY = "Books and stationery"
    # Food
    CAFES_AND_RESTAURANTS = "Cafes and restaurants"
    FAST_FOOD_STORES = "Fast food stores"
    SUPERMARKETS_AND_GROCERY_STORES = "Supermarkets and grocery stores"
    SPECIALTY_FOOD_STORES = "Specialty food stores"
    BAKERIES = "Bakeries"
    BUTCHERS = "Butchers"
    LIQUOR_STORES = "Liquor stores"
    FOOD_DELIVERY = "Food delivery"
    # Health
    DOCTORS_AND_GPS = "Doctors and GPs"
    DENTISTS = "Dentists"
    PHARMACIES = "Pharmacies"
    OPTOMETRISTS = "Optometrists"
    HOSPITALS = "Hospitals"
    PHYSIOTHERAPISTS = "Physiotherapists"
    HEALTH_INSURANCE = "Health insurance"
    VETERINARY_SERVICES = "Veterinary services"
    # Household
    HARDWARE_STORES = "Hardware stores"
    FURNITURE_STORES = "Furniture stores"
    HOMEWARES = "Homewares"
    ELECTRONICS_AND_TECHNOLOGY = "Electronics and technology"
    DEPARTMENT_STORES = "Department stores"
    GARDEN_CENTRES = "Garden centres"
    PET_SUPPLIES = "Pet supplies"
    HOME_INSURANCE = "Home insurance"
    CLEANING_SERVICES = "Cleaning services"
    # Housing
    RENT = "Rent"
    MORTGAGE_PAYMENTS = "Mortgage payments"
    RATES = "Rates"
    BODY_CORPORATE = "Body corporate"
    REAL_ESTATE_AGENTS = "Real estate agents"
    BUILDERS_AND_TRADESPEOPLE = "Builders and tradespeople"
    # Income
    SALARY_AND_WAGES = "Salary and wages"
    GOVERNMENT_BENEFITS = "Government benefits"
    SUPERANNUATION = "Superannuation"
    INTEREST_EARNED = "Interest earned"
    DIVIDENDS = "Dividends"
    RENTAL_INCOME = "Rental income"
    TAX_REFUNDS = "Tax refunds"
    REFUNDS = "Refunds"
    OTHER_INCOME = "Other income"
    # Lifestyle
    BARS_PUBS_AND_NIGHTCLUBS = "Bars, pubs and nightclubs"
    CINEMAS = "Cinemas"
    EVENTS_AND_TICKETS = "Events and tickets"
    GYMS_AND_FITNESS = "Gyms and fitness"
    SPORTING_GOODS = "Sporting goods"
    HOBBIES = "Hobbies"
    GAMING = "Gaming"
    LOTTERY_AND_GAMBLING = "Lottery and gambling"
    STREAMING_SERVICES = "Streaming services"
    SUBSCRIPTIONS = "Subscriptions"
    GIFTS = "Gifts"
    CHARITIES_AND_DONATIONS = "Charities and donations"
    ACCOMMODATION = "Accommodation"
    TRAVEL_AGENTS = "Travel agents"
    TOBACCO_AND_VAPING = "Tobacco and vaping"
    # Professional services
    ACCOUNTING_SERVICES = "Accounting services"
    LEGAL_SERVICES = "Legal services"
    BANK_FEES = "Bank fees"
    FINANCIAL_SERVICES = "Financial services"
    LIFE_INSURANCE = "Life insurance"
    GOVERNMENT_SERVICES = "Government services"
    POSTAL_AND_COURIER_SERVICES = "Postal and courier services"
    TAX_PAYMENTS = "Tax payments"
    # Transfers
    INTERNAL_TRANSFERS = "Internal transfers"
    TRANSFERS_TO_OTHERS = "Transfers to others"
    CREDIT_CARD_PAYMENTS = "Credit card payments"
    LOAN_REPAYMENTS = "Loan repayments"
    SAVINGS_AND_INVESTMENTS = "Savings and investments"
    KIWISAVER_CONTRIBUTIONS = "KiwiSaver contributions"
    CASH_WITHDRAWALS = "Cash withdrawals"
    FOREIGN_EXCHANGE = "Foreign exchange"
    # Transport
    FUEL_STATIONS = "Fuel stations"
    PUBLIC_TRANSPORT = "Public transport"
    TAXIS_AND_RIDESHARE = "Taxis and rideshare"
    PARKING = "Parking"
    TOLLS = "Tolls"
    AIRLINES = "Airlines"
    CAR_RENTAL = "Car rental"
    VEHICLE_INSURANCE = "Vehicle insurance"
    VEHICLE_SERVICING = "Vehicle servicing"
    VEHICLE_REGISTRATION = "Vehicle registration"
    ELECTRIC_VEHICLE_CHARGING = "Electric vehicle charging"
    # Utilities
    ELECTRICITY = "Electricity"
    GAS = "Gas"
    WATER = "Water"
    INTERNET = "Internet"
    MOBILE_PHONE = "Mobile phone"
    LANDLINE = "Landline"
    # Fallback for names outside this table
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, name: str) -> "NzfccCode":
        try:
            return cls(name)
        except ValueError:
            return cls.UNKNOWN

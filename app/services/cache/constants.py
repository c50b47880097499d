"""Cache TTL and key prefix constants."""

# Response cache TTLs (in seconds)
TTL_UNIVERSITY_SCORE = 12 * 60 * 60  # 12 hours
TTL_PROFILE_MATCH = 12 * 60 * 60  # 12 hours
TTL_BUDGET = 24 * 60 * 60  # 24 hours - fees and living costs move slowly
TTL_OVERALL = 12 * 60 * 60  # 12 hours
TTL_DOCUMENTS = 24 * 60 * 60  # 24 hours - visa checklists move slowly
TTL_COMPARE = 12 * 60 * 60  # 12 hours

# Cache key prefixes, first part of every normalized key
KEY_PREFIX_UNIVERSITY_SCORE = "uniscore"  # uniscore:{name}:{country}
KEY_PREFIX_PROFILE_MATCH = "profile"  # profile:cgpa={cgpa}:degree={degree}:...
KEY_PREFIX_BUDGET = "budget"  # budget:{country}:{city}
KEY_PREFIX_OVERALL = "overall"  # overall:{university}:{country}
KEY_PREFIX_DOCUMENTS = "docs"  # docs:{country}
KEY_PREFIX_COMPARE = "compare"  # compare:{uni1}:{uni2}[:{uni3}]

KEY_DELIMITER = ":"

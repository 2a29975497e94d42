"""Parent/student screens"""
